"""Initial sample data."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from equine_center.config import Settings, get_settings
from equine_center.models import Gender, HorseStatus, LocationType, UserRole, utc_now
from equine_center.repositories import RecordStore
from equine_center.security import PasswordHasher

logger = logging.getLogger(__name__)

SAMPLE_OWNERS = [
    {"name": "John Smith Racing", "email": "john@smithracing.com", "phone": "555-0101"},
    {"name": "Golden Gate Stables", "email": "info@goldengatestables.com", "phone": "555-0102"},
]

DEFAULT_LOCATIONS = [
    ("Barn A", LocationType.BARN, 50, "Main training barn"),
    ("Barn B", LocationType.BARN, 40, "Secondary barn"),
    ("Main Track", LocationType.TRACK, 20, "Primary racing track"),
    ("Training Track", LocationType.TRACK, 15, "Training and exercise track"),
    ("Paddock 1", LocationType.PADDOCK, 10, "Large paddock for turnout"),
    ("Medical Bay", LocationType.MEDICAL, 5, "Veterinary treatment area"),
]

SAMPLE_HORSE_COUNT = 50
BREEDS = ["Thoroughbred", "Quarter Horse", "Arabian"]
COLORS = ["Bay", "Chestnut", "Black", "Gray"]
GENDERS = [Gender.STALLION, Gender.MARE, Gender.GELDING]


async def seed_database(
    session: AsyncSession,
    settings: Settings | None = None,
    hasher: PasswordHasher | None = None,
) -> bool:
    """
    Create default users, owners, locations and horses.

    Does nothing once any user exists.

    Returns:
        True when data was written
    """
    settings = settings or get_settings()
    hasher = hasher or PasswordHasher()
    store = RecordStore(session)

    if await store.count("users") > 0:
        return False

    await store.bulk_add("users", [
        {
            "username": "admin",
            "email": "admin@delmar.com",
            "role": UserRole.ADMIN.value,
            "password_hash": hasher.hash("admin123"),
        },
        {
            "username": "viewer",
            "email": "viewer@delmar.com",
            "role": UserRole.VIEWER.value,
            "password_hash": hasher.hash("viewer123"),
        },
    ])

    owner_ids = await store.bulk_add("owners", SAMPLE_OWNERS)
    await store.bulk_add("users", [
        {
            "username": username,
            "email": owner["email"],
            "role": UserRole.OWNER.value,
            "password_hash": hasher.hash("owner123"),
        }
        for username, owner in zip(("johnsmith", "goldengate"), SAMPLE_OWNERS)
    ])

    await store.bulk_add("locations", [
        {"name": name, "type": kind.value, "capacity": capacity, "description": description}
        for name, kind, capacity, description in DEFAULT_LOCATIONS
    ])

    year = utc_now().year
    await store.bulk_add("horses", [
        {
            "tracking_id": f"{settings.tracking_id_prefix}{year}{i:04d}",
            "name": f"Horse {i}",
            "registration_number": f"REG{i}",
            "breed": BREEDS[i % 3],
            "color": COLORS[i % 4],
            "age": 3 + (i % 5),
            "gender": GENDERS[i % 3].value,
            "owner_id": owner_ids[0] if i % 2 == 0 else owner_ids[1],
            "status": HorseStatus.ACTIVE.value,
        }
        for i in range(1, SAMPLE_HORSE_COUNT + 1)
    ])

    await session.commit()
    logger.info("Database initialized with sample data")
    return True
