"""内置种子数据 -- 持久化层不可用或为空时的降级数据"""

from datetime import date

from .models.category import Category
from .models.enums import Phase, Priority, Status, UserRole
from .models.task import Task
from .models.user import User


def _member(
    user_id: str,
    name: str,
    email: str,
    department: str,
    role: UserRole = UserRole.TEAM_MEMBER,
    password: str = "password123",
) -> User:
    return User(
        id=user_id,
        name=name,
        email=email,
        role=role,
        department=department,
        password=password,
    )


SEED_SUPER_ADMIN = _member(
    "9",
    "Super Admin",
    "admin@iitm.ac.in",
    "Executive",
    role=UserRole.SUPER_ADMIN,
    password="admin123",
)


def seed_users() -> list[User]:
    return [
        _member("1", "Dr. Anup Naha", "anup@example.com", "Student Outreach"),
        _member("2", "Ms. Rachneet", "rachneet@example.com", "Promotion"),
        _member("3", "Mr. Anmol", "anmol@example.com", "Logistics"),
        _member("4", "Ms. Shalini", "shalini@example.com", "Admin", role=UserRole.ADMIN),
        _member("5", "Dr. Usha Rani", "usha@example.com", "Education"),
        _member("6", "Puja Munjal", "puja@iitm.ac.in", "Strategy", role=UserRole.ADMIN),
        _member("7", "Lalit Kumar", "lalit@iitm.ac.in", "Operations"),
        _member(
            "8",
            "Ashwani Sachdeva (President)",
            "ashwani@iitm.ac.in",
            "President Office",
            role=UserRole.ADMIN,
        ),
        SEED_SUPER_ADMIN.model_copy(),
    ]


def _category(
    category_id: str,
    name: str,
    phase: Phase,
    responsible: list[str],
    due: date,
    priority: Priority,
) -> Category:
    return Category(
        id=category_id,
        name=name,
        phase=phase,
        responsible_persons=responsible,
        progress=0,
        status=Status.NOT_STARTED,
        due_date=due,
        priority=priority,
    )


def seed_categories() -> list[Category]:
    return [
        _category(
            "cat-001",
            "Student Club Participation",
            Phase.PRE_EVENT,
            ["Dr. Anup Naha", "Ms. Rachneet", "Ashwani Sachdeva (President)"],
            date(2026, 3, 5),
            Priority.HIGH,
        ),
        _category(
            "cat-002",
            "Email & Invitations",
            Phase.PRE_EVENT,
            ["Mr. Anmol", "IIT Team", "Puja Munjal"],
            date(2026, 3, 1),
            Priority.HIGH,
        ),
        _category(
            "cat-003",
            "Social Media Promotion",
            Phase.PRE_EVENT,
            ["YA Rep", "IIT Team", "Lalit Kumar"],
            date(2026, 3, 9),
            Priority.MEDIUM,
        ),
        _category(
            "cat-004",
            "Campus Publicity",
            Phase.PRE_EVENT,
            ["Ms. Shalini", "IIT Team"],
            date(2026, 3, 1),
            Priority.HIGH,
        ),
        _category(
            "cat-005",
            "Live Social Media Updates",
            Phase.DURING_EVENT,
            ["YA Rep", "Lalit Kumar"],
            date(2026, 3, 10),
            Priority.MEDIUM,
        ),
        _category(
            "cat-006",
            "Event Documentation",
            Phase.DURING_EVENT,
            ["Ms. Sanchi", "Puja Munjal"],
            date(2026, 3, 10),
            Priority.HIGH,
        ),
        _category(
            "cat-007",
            "Event Highlights Sharing",
            Phase.POST_EVENT,
            ["Digital Team", "Ashwani Sachdeva (President)"],
            date(2026, 3, 15),
            Priority.MEDIUM,
        ),
    ]


def seed_tasks() -> list[Task]:
    return []
