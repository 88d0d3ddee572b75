"""Static metadata describing FastFood Trainer."""

APP_NAME = "FastFood Trainer"
APP_VERSION = "0.1"
APP_ABOUT_TEXT = (
    "FastFood Trainer is a timed order-processing practice simulation. "
    "Play through scripted days of counter, kitchen, cleaning and complaint stages, "
    "and unlock the next day and veteran tips by scoring well."
)
