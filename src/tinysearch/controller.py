"""
Autocomplete controller: binds one text input to the index.

States per input:
    closed  - no list element in the page
    open    - list element rendered (options, or a "No results" status)

Typing is debounced; each render fully replaces the previous list and
resets the keyboard focus. Arrow keys move the focus with wraparound,
Enter activates the focused (or first) option, Escape and clicks outside
the input close the list. ARIA combobox/listbox attributes on the input are
kept in sync with every transition.
"""

from __future__ import annotations

import logging
from typing import List, Optional
from urllib.parse import quote

from .config import (
    TOP_K, DEBOUNCE_MS, INPUT_ID, LIST_ID_SUFFIX, OPTION_ID_INFIX, QUERY_PARAM,
    LIST_CLASS, ACTIVE_CLASS, EMPTY_CLASS, EMPTY_TEXT,
)
from .debounce import Debouncer
from .dom import Element, Event, Page
from .highlight import highlight
from .models import Document
from .search import find_matches
from .store import IndexStore

log = logging.getLogger(__name__)

CLOSED = "closed"
OPEN = "open"

# encodeURIComponent leaves these unescaped
_URI_COMPONENT_SAFE = "!~*'()"


def build_href(url: str, query: str) -> str:
    """Destination for a chosen result: its url plus the query as ?q=."""
    sep = "&" if "?" in url else "?"
    return f"{url}{sep}{QUERY_PARAM}={quote(query, safe=_URI_COMPONENT_SAFE)}"


class AutocompleteController:
    """
    State machine for one input.

    Event handlers are plain callbacks, but `input` schedules a debounced
    render and `focus`/`click` start the index load, so events must be
    dispatched from inside a running event loop; outside one they raise
    RuntimeError. The only exception is focus or click on a store that is
    already ready, which never touches the loop.
    """

    def __init__(
        self,
        page: Page,
        input_el: Element,
        store: IndexStore,
        *,
        limit: int = TOP_K,
        debounce_ms: int = DEBOUNCE_MS,
    ) -> None:
        self.page = page
        self.input = input_el
        self.store = store
        self.limit = limit
        self.current_focus = -1
        self.results: List[Document] = []
        self.query = ""
        self._generation = 0
        self.debounced_render = Debouncer(self.render_list, debounce_ms)

    # ------------- wiring -------------

    def attach(self) -> "AutocompleteController":
        inp = self.input
        inp.set_attribute("role", "combobox")
        inp.set_attribute("aria-autocomplete", "list")
        inp.set_attribute("aria-expanded", "false")

        inp.add_event_listener("focus", self._on_focus)
        inp.add_event_listener("click", self._on_focus)
        inp.add_event_listener("input", self._on_input)
        inp.add_event_listener("keydown", self._on_keydown)
        self.page.add_event_listener("click", self._on_page_click)
        return self

    @property
    def list_id(self) -> str:
        return f"{self.input.id}{LIST_ID_SUFFIX}"

    @property
    def state(self) -> str:
        return OPEN if self.list_element() is not None else CLOSED

    def list_element(self) -> Optional[Element]:
        return self.page.get_element_by_id(self.list_id)

    def options(self) -> List[Element]:
        lst = self.list_element()
        if lst is None:
            return []
        return [c for c in lst.children if c.get_attribute("role") == "option"]

    # ------------- transitions -------------

    def close_list(self) -> None:
        # any render still waiting on the index is now stale
        self._generation += 1
        lst = self.list_element()
        if lst is not None and lst.parent is not None:
            lst.parent.remove_child(lst)
        self.current_focus = -1
        self.results = []

        self.input.set_attribute("aria-expanded", "false")
        self.input.remove_attribute("aria-activedescendant")
        self.input.remove_attribute("aria-controls")

    async def render_list(self, value: str) -> None:
        self.close_list()
        generation = self._generation
        if not value:
            return
        documents = await self.store.ensure_loaded()
        if generation != self._generation:
            log.debug("Dropping stale render for %r", value)
            return

        lst = self.page.create_element("div")
        lst.id = self.list_id
        lst.set_attribute("class", LIST_CLASS)
        lst.set_attribute("role", "listbox")
        lst.set_attribute("aria-live", "polite")
        parent = self.input.parent if self.input.parent is not None else self.page.body
        parent.append_child(lst)

        self.input.set_attribute("aria-controls", lst.id)
        self.input.set_attribute("aria-expanded", "true")

        self.query = value
        self.results = find_matches(value, documents, self.limit)
        if not self.results:
            empty = self.page.create_element("div")
            empty.class_name = EMPTY_CLASS
            empty.set_attribute("role", "status")
            empty.text_content = EMPTY_TEXT
            lst.append_child(empty)
            return

        for i, doc in enumerate(self.results):
            option = self.page.create_element("div")
            option.set_attribute("role", "option")
            option.set_attribute("aria-selected", "false")
            option.id = f"{self.input.id}{OPTION_ID_INFIX}{i}"
            option.set_attribute("data-href", build_href(doc.url, value))
            option.inner_html = highlight(doc.title, value)
            option.add_event_listener("click", lambda _e, doc=doc: self.activate(doc))
            lst.append_child(option)

    def move_focus(self, step: int) -> None:
        options = self.options()
        if not options:
            self.current_focus = -1
            return
        self.current_focus += step
        if self.current_focus >= len(options):
            self.current_focus = 0
        if self.current_focus < 0:
            self.current_focus = len(options) - 1

        for el in options:
            el.remove_class(ACTIVE_CLASS)
            el.set_attribute("aria-selected", "false")
        active = options[self.current_focus]
        active.add_class(ACTIVE_CLASS)
        active.set_attribute("aria-selected", "true")
        if active.id:
            self.input.set_attribute("aria-activedescendant", active.id)

    def activate(self, doc: Document) -> str:
        href = build_href(doc.url, self.query)
        log.info("Navigating to %s", href)
        self.page.navigate(href)
        return href

    # ------------- event handlers -------------

    def _on_focus(self, _event: Event) -> None:
        self.store.preload()

    def _on_input(self, _event: Event) -> None:
        self.debounced_render(self.input.value)

    def _on_keydown(self, event: Event) -> None:
        key = event.key
        if key == "ArrowDown":
            self.move_focus(1)
            event.prevent_default()
        elif key == "ArrowUp":
            self.move_focus(-1)
            event.prevent_default()
        elif key == "Enter":
            event.prevent_default()
            options = self.options()
            if self.current_focus > -1 and options:
                options[self.current_focus].click()
            elif options:
                options[0].click()
        elif key == "Escape":
            self.close_list()

    def _on_page_click(self, event: Event) -> None:
        if event.target is not self.input:
            self.close_list()


def setup_autocomplete(page: Page, input_el: Element, store: IndexStore, **kwargs) -> AutocompleteController:
    return AutocompleteController(page, input_el, store, **kwargs).attach()


def boot(page: Page, store: IndexStore, input_id: str = INPUT_ID, **kwargs) -> Optional[AutocompleteController]:
    """
    Page-ready hook: wire the input (if the page has one), start loading the
    index right away, and pre-fill the input from ?q= without rendering.
    Needs a running event loop.
    """
    el = page.get_element_by_id(input_id)
    controller = setup_autocomplete(page, el, store, **kwargs) if el is not None else None
    store.preload()
    q = page.query_param(QUERY_PARAM)
    if q and el is not None:
        el.value = q
    return controller
