# Dependency Injection Container.

from payment_demo.overlay.interface import OverlayNotifier
from payment_demo.presentation.interface import PresentationSurface
from payment_demo.settings import Settings


class DependencyContainer:
    """Holds the collaborators shared by every payment session.

    Sessions never reach for process-wide singletons; everything they talk to
    outside their own state comes from here, which keeps tests isolated.
    """

    def __init__(
        self,
        settings: Settings,
        surface: PresentationSurface,
        notifier: OverlayNotifier,
    ) -> None:
        """
        Initializes the container.

        Args:
            settings: Application settings.
            surface: The presentation surface showing payment screens.
            notifier: The overlay notifier announcing successful payments.
        """
        self.settings = settings
        self.surface = surface
        self.notifier = notifier
