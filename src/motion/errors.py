"""Error types shared by every stage of the motion engine.

Only configuration problems are errors. Evaluation at any time point is total:
boundary and degenerate cases clamp to a defined value instead of raising.
"""


class ConfigurationError(ValueError):
    """Invalid scene, preset, keyframe or spring configuration.

    Raised while a scene is being loaded or built, never while it is being
    evaluated. The message names the offending element, group, event or
    keyframe index.
    """
