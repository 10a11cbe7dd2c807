from enum import Enum

class TaskPriority(Enum):
    # Todoist counts upwards, 4 is the most urgent
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    URGENT = 4

    @property
    def label(self) -> str:
        return {
            TaskPriority.URGENT: "P1 (Urgent)",
            TaskPriority.HIGH: "P2 (High)",
            TaskPriority.MEDIUM: "P3 (Medium)",
            TaskPriority.LOW: "P4 (Low)",
        }[self]
