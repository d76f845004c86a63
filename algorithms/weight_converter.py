class WeightConverter:
    """Utility for converting between kg and lb and showing per-hand loads."""

    KG_TO_LB = 2.20462

    @staticmethod
    def kg_to_lb(kg: float) -> float:
        return round(kg * WeightConverter.KG_TO_LB, 2)

    @staticmethod
    def lb_to_kg(lb: float) -> float:
        return round(lb / WeightConverter.KG_TO_LB, 2)

    @staticmethod
    def total_load(weight: float, is_per_hand: bool) -> float:
        """Return the displayed load; per-hand weights count twice."""
        return weight * 2 if is_per_hand else weight

    @staticmethod
    def _fmt(value: float) -> str:
        return f"{value:g}"

    @classmethod
    def display(cls, weight: float, is_per_hand: bool, unit: str = "lb") -> str:
        """Format a weight such as ``40 lb (20x2)`` for per-hand sets."""
        total = cls._fmt(cls.total_load(weight, is_per_hand))
        if is_per_hand:
            return f"{total} {unit} ({cls._fmt(weight)}x2)"
        return f"{total} {unit}"
