"""Configuration errors raised while building a growth image."""


class GrowthConfigError(ValueError):
    """Base class for invalid growth configurations."""


class NoLayersDefined(GrowthConfigError):
    def __init__(self) -> None:
        super().__init__("At least one layer must be added before build()")


class NoStagesDefined(GrowthConfigError):
    def __init__(self) -> None:
        super().__init__("At least one stage must be defined before build()")


class NoPaletteDefined(GrowthConfigError):
    def __init__(self, stage_index: int) -> None:
        super().__init__(f"Stage {stage_index} has no palette")
        self.stage_index = stage_index


class ConflictingRegions(GrowthConfigError):
    def __init__(self, stage_index: int) -> None:
        super().__init__(
            f"Stage {stage_index} sets both forbidden_points and allowed_points"
        )
        self.stage_index = stage_index
