import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from job_post_form.models import Option

logger = logging.getLogger(__name__)

RefreshCallback = Callable[[], Awaitable[list[Option]]]

DEFAULT_REQUISITES_OPTIONS = [
    Option(id="pcd", label="Pessoa com Deficiência"),
    Option(id="mulher", label="Mulher"),
    Option(id="estagio", label="Estágio"),
    Option(id="negro", label="Negro"),
]

DEFAULT_STACK_OPTIONS = [
    Option(id="javascript", label="JavaScript"),
    Option(id="react", label="React"),
    Option(id="vue", label="Vue"),
    Option(id="php", label="PHP"),
    Option(id="elixir", label="Elixir"),
    Option(id="ruby", label="Ruby"),
    Option(id="laravel", label="Laravel"),
]


def parse_options(raw: Iterable[dict[str, Any]], label_key: str = "name") -> list[Option]:
    """
    Normalize `[{id, <label_key>}]` payloads into Option instances.
    Entries without an id or a label are skipped.
    """
    options: list[Option] = []
    for item in raw:
        option_id = item.get("id")
        label = item.get(label_key) or item.get("label")
        if option_id is None or not label:
            logger.debug(f"Skipping malformed option entry: {item!r}")
            continue
        options.append(Option(id=option_id, label=str(label)))
    return options


class OptionSource:
    """
    Read-only list of options for a select field.

    The options are only reloaded when `refresh()` is awaited, using the
    callback supplied by the caller.
    """

    def __init__(
        self,
        name: str,
        options: Iterable[Option] = (),
        refresh: RefreshCallback | None = None,
    ) -> None:
        self.name = name
        self._options = list(options)
        self._refresh = refresh

    @property
    def options(self) -> list[Option]:
        return list(self._options)

    def __len__(self) -> int:
        return len(self._options)

    def labels(self) -> list[str]:
        return [option.label for option in self._options]

    def get(self, option_id: str | int) -> Option | None:
        for option in self._options:
            if str(option.id) == str(option_id):
                return option
        return None

    def contains(self, option_id: str | int) -> bool:
        return self.get(option_id) is not None

    def label_for(self, option_id: str | int) -> str | None:
        option = self.get(option_id)
        return option.label if option else None

    async def refresh(self) -> list[Option]:
        """Reload the options through the refresh callback, if one was given."""
        if self._refresh is None:
            logger.debug(f"No refresh callback for '{self.name}' options, keeping current list")
            return self.options
        self._options = list(await self._refresh())
        logger.info(f"Refreshed '{self.name}' options: {len(self._options)} available")
        return self.options
