from .progression import recommend
from .weight_converter import WeightConverter

__all__ = ["recommend", "WeightConverter"]
