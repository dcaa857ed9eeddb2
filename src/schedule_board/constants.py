STATE_DIR_NAME = ".schedule_board"
CONFIG_FILE = "config.yaml"

DEFAULT_LONG_PRESS_DELAY_MS = 500
DEFAULT_MOVE_THRESHOLD_PX = 10
DEFAULT_TAP_MAX_DURATION_MS = 500
DEFAULT_SYNTHETIC_MOVE_DELAY_MS = 10  # gap between synthetic touchstart and touchmove
DEFAULT_HAPTIC_PULSE_MS = 50

DEFAULT_SEGMENTS_BY_HOUR = 6
DEFAULT_DAY_START_HOUR = 6
DEFAULT_DAY_END_HOUR = 21

CAL_EVENT_CLASS = "cal-event"
LONG_PRESS_WAITING_CLASS = "long-press-waiting"
LONG_PRESS_ACTIVE_CLASS = "long-press-active"
DRAG_ENABLED_CLASS = "drag-enabled"
DRAG_ALLOWED_ATTR = "data-drag-allowed"
TASK_ID_ATTR = "data-task-id"

GESTURE_MARKER_CLASSES = (
    LONG_PRESS_WAITING_CLASS,
    LONG_PRESS_ACTIVE_CLASS,
    DRAG_ENABLED_CLASS,
)

TOUCH_START = "touchstart"
TOUCH_MOVE = "touchmove"
TOUCH_END = "touchend"
TOUCH_CANCEL = "touchcancel"

SYNTHETIC_TOUCH_RADIUS = 2.5
SYNTHETIC_TOUCH_FORCE = 0.5

TASK_COLORS = {
    "blue": {"primary": "#1e90ff", "secondary": "#D1E8FF"},
    "red": {"primary": "#ad2121", "secondary": "#FAE3E3"},
}
NEUTRAL_COLOR = "blue"
CONFLICT_COLOR = "red"

ANALYTICS_TASK_DRAG_RESIZE = "task-drag-resize"
ANALYTICS_OPEN_NEW_TASK = "open-new-task-modal"
ANALYTICS_OPEN_EDIT_TASK = "open-edit-task-modal"
ANALYTICS_COLUMN_REORDER = "column-reorder"
