# --- profiles: set sensible bundles of defaults --------------------------------
class Profile:
    NONE = "none"
    ARROW_MARKERS = "arrow_markers"
    DOT_MARKERS = "dot_markers"
    FAST_DEBUG = "fast_debug"

PROFILES = {
    # Animated arrow models every 40 cm; the arrow at each turn pivot is dropped.
    Profile.ARROW_MARKERS: dict(
        route=dict(
            marker_spacing_m=0.40,
            turn_trim=True,
            spacing_rounding="floor",
        ),
        placement=dict(
            arrow_tilt_deg=-90.0,
            arrow_lift_m=0.05,
            arrow_scale=0.015,
            finish_scale=0.20,
        ),
    ),

    # Small spheres every 20 cm along a plane-anchored route, corners kept.
    Profile.DOT_MARKERS: dict(
        route=dict(
            marker_spacing_m=0.20,
            turn_trim=False,
            spacing_rounding="floor",
        ),
        placement=dict(
            arrow_tilt_deg=0.0,
            arrow_lift_m=0.0,
            arrow_scale=0.02,
            finish_scale=0.05,
            finish_spin_deg_s=0.0,
            arrow_max_offset_m=0.0,
        ),
    ),

    Profile.FAST_DEBUG: dict(
        route=dict(
            marker_spacing_m=1.0,
            turn_trim=True,
        ),
        run=dict(
            save_birdeye=True,
            log_level="DEBUG",
        ),
    ),
}
