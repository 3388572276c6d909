"""Allow running RoundTimer as a module: python -m roundtimer."""

import logging
import sys

from PyQt6.QtWidgets import QApplication

from .audio.sounds import SoundManager
from .controller import TimerController
from .settings import SettingsStore, SOUND_ENABLED_KEY, SOUND_VOLUME_KEY
from .ui.timer_window import TimerWindow


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication(sys.argv)
    app.setApplicationName("RoundTimer")
    app.setOrganizationName("RoundTimer")

    store = SettingsStore()

    sounds = SoundManager(parent=app)
    sounds.set_volume(store.get(SOUND_VOLUME_KEY, 70))
    sounds.set_enabled(store.get(SOUND_ENABLED_KEY, True))

    controller = TimerController(store, audio=sounds)
    window = TimerWindow(controller)
    window.show()

    logging.getLogger(__name__).info("RoundTimer ready (settings: %s)", store.path)
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
