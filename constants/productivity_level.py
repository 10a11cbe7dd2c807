from enum import Enum

class ProductivityLevel(Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    MODERATE = "Moderate"
    LOW = "Low"
    VERY_LOW = "Very Low"

    @classmethod
    def for_score(cls, score: int) -> "ProductivityLevel":
        if score >= 80:
            return cls.EXCELLENT
        if score >= 60:
            return cls.GOOD
        if score >= 40:
            return cls.MODERATE
        if score >= 20:
            return cls.LOW
        return cls.VERY_LOW

    @property
    def message(self) -> str:
        return {
            ProductivityLevel.EXCELLENT: "On fire!",
            ProductivityLevel.GOOD: "Good momentum",
            ProductivityLevel.MODERATE: "Getting started",
            ProductivityLevel.LOW: "Time to focus",
            ProductivityLevel.VERY_LOW: "Need a boost",
        }[self]
