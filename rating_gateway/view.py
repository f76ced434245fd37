"""
Rating views: the component that actually prompts the user.

The gateway only decides *when* to prompt. Showing the prompt is delegated
to an IRatingView, typically a custom implementation that calls the
platform's native review dialog.
"""

import asyncio
import webbrowser
from typing import Optional, Protocol, runtime_checkable

from rating_gateway.logger import logger
from rating_gateway.settings import settings


@runtime_checkable
class IRatingView(Protocol):
    """
    Contract for a view that prompts the user to review the application.

    Both methods are best effort: failures are handled inside the view and
    never reported back to the gateway.
    """

    def try_open_rating_page(self) -> None:
        """Try to open the review page."""
        ...

    async def try_open_rating_page_async(self) -> None:
        """Try to open the review page, awaiting the native dialog."""
        ...


class DefaultRatingView:
    """
    Opens the application's store page in the system browser.

    The store URL comes from the constructor or settings view.store_url.
    Without a URL there is no store page to open, and the view raises
    NotImplementedError: supply a store_url or your own IRatingView.
    """

    def __init__(self, store_url: Optional[str] = None):
        self.store_url = store_url or settings.get_nested("view.store_url")

    def try_open_rating_page(self) -> None:
        if not self.store_url:
            raise NotImplementedError(
                "No store_url configured: set view.store_url or pass a custom IRatingView"
            )

        try:
            opened = webbrowser.open(self.store_url)
        except webbrowser.Error as e:
            logger.warning("Could not open rating page", url=self.store_url, error=str(e))
            return

        if not opened:
            logger.warning("No browser available to open rating page", url=self.store_url)

    async def try_open_rating_page_async(self) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self.try_open_rating_page)

    def __repr__(self) -> str:
        return f"DefaultRatingView(store_url={self.store_url!r})"
