from barberbook.domain.entities.service import Service

SERVICES: tuple[Service, ...] = (
    Service(id=1, name="The Executive Cut", duration="45 min", price=35),
    Service(id=2, name="Beard Maintenance", duration="20 min", price=15),
    Service(id=3, name="Skin Fade", duration="40 min", price=30),
    Service(id=4, name="Hot Towel Shave", duration="30 min", price=25),
)

TIME_SLOTS: tuple[str, ...] = (
    "09:00",
    "09:45",
    "10:30",
    "11:15",
    "13:00",
    "13:45",
    "14:30",
    "15:15",
    "16:00",
)
