"""
Minimal page model the autocomplete controller is bound to.

Only what the widget needs: an element tree with attributes, classes and
inner markup, event listeners with bubbling up to the page, a current
address and a navigation hook. Any element tree can be serialised back to
HTML with to_html(), which is how the web frontend ships rendered
fragments.
"""

from __future__ import annotations

import html
import re
from collections import defaultdict
from typing import Callable, Dict, Iterator, List, Optional
from urllib.parse import parse_qs, urlsplit

from .normalize import escape_html

Listener = Callable[["Event"], None]

_VOID_TAGS = {"input", "br", "hr", "img", "meta", "link"}
_NON_BUBBLING = {"focus", "blur"}
_TAG_RE = re.compile(r"<[^>]+>")


class Event:
    def __init__(self, type: str, *, target: Optional["Element"] = None, key: str | None = None) -> None:
        self.type = type
        self.target = target
        self.key = key
        self.default_prevented = False
        self.bubbles = type not in _NON_BUBBLING

    def prevent_default(self) -> None:
        self.default_prevented = True


class _EventTarget:
    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)

    def add_event_listener(self, type: str, fn: Listener) -> None:
        self._listeners[type].append(fn)

    def _fire(self, event: Event) -> None:
        for fn in list(self._listeners.get(event.type, ())):
            fn(event)


class Element(_EventTarget):
    def __init__(self, tag: str, page: Optional["Page"] = None) -> None:
        super().__init__()
        self.tag = tag.lower()
        self.page = page
        self.attributes: Dict[str, str] = {}
        self.children: List[Element] = []
        self.parent: Optional[Element] = None
        self.value = ""
        self._markup = ""

    # ------------- attributes -------------

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = str(value)

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def remove_attribute(self, name: str) -> None:
        self.attributes.pop(name, None)

    @property
    def id(self) -> str:
        return self.attributes.get("id", "")

    @id.setter
    def id(self, value: str) -> None:
        self.set_attribute("id", value)

    @property
    def class_name(self) -> str:
        return self.attributes.get("class", "")

    @class_name.setter
    def class_name(self, value: str) -> None:
        self.set_attribute("class", value)

    def has_class(self, name: str) -> bool:
        return name in self.class_name.split()

    def add_class(self, name: str) -> None:
        if not self.has_class(name):
            self.class_name = " ".join(self.class_name.split() + [name])

    def remove_class(self, name: str) -> None:
        self.class_name = " ".join(c for c in self.class_name.split() if c != name)

    # ------------- content -------------

    @property
    def inner_html(self) -> str:
        return self._markup + "".join(c.to_html() for c in self.children)

    @inner_html.setter
    def inner_html(self, markup: str) -> None:
        self._detach_children()
        self._markup = markup

    @property
    def text_content(self) -> str:
        own = html.unescape(_TAG_RE.sub("", self._markup))
        return own + "".join(c.text_content for c in self.children)

    @text_content.setter
    def text_content(self, text: str) -> None:
        self._detach_children()
        self._markup = escape_html(text)

    # ------------- tree -------------

    def append_child(self, child: "Element") -> "Element":
        if child.parent is not None:
            child.parent.remove_child(child)
        child.parent = self
        if child.page is None:
            child.page = self.page
        self.children.append(child)
        return child

    def remove_child(self, child: "Element") -> "Element":
        self.children.remove(child)
        child.parent = None
        return child

    def _detach_children(self) -> None:
        for c in self.children:
            c.parent = None
        self.children = []

    def iter(self) -> Iterator["Element"]:
        """Depth-first walk over this element and its descendants."""
        yield self
        for c in self.children:
            yield from c.iter()

    def get_elements_by_tag_name(self, tag: str) -> List["Element"]:
        tag = tag.lower()
        return [e for e in self.iter() if e is not self and e.tag == tag]

    @property
    def is_connected(self) -> bool:
        node = self
        while node.parent is not None:
            node = node.parent
        return node.page is not None and node is node.page.body

    # ------------- events -------------

    def dispatch_event(self, event: Event) -> Event:
        if event.target is None:
            event.target = self
        node: Optional[Element] = self
        while node is not None:
            node._fire(event)
            if not event.bubbles:
                return event
            node = node.parent
        if self.page is not None and self.is_connected:
            self.page._fire(event)
        return event

    def click(self) -> Event:
        return self.dispatch_event(Event("click"))

    def focus(self) -> Event:
        return self.dispatch_event(Event("focus"))

    def key_down(self, key: str) -> Event:
        return self.dispatch_event(Event("keydown", key=key))

    def type_text(self, value: str) -> Event:
        """Replace the value and fire an `input` event, like a keystroke."""
        self.value = value
        return self.dispatch_event(Event("input"))

    # ------------- serialisation -------------

    def to_html(self) -> str:
        attrs = dict(self.attributes)
        if self.tag == "input" and self.value:
            attrs["value"] = self.value
        rendered = "".join(f' {k}="{escape_html(v)}"' for k, v in attrs.items())
        if self.tag in _VOID_TAGS:
            return f"<{self.tag}{rendered}>"
        return f"<{self.tag}{rendered}>{self.inner_html}</{self.tag}>"

    def __repr__(self) -> str:
        return f"<Element {self.tag}#{self.id}>" if self.id else f"<Element {self.tag}>"


class Page(_EventTarget):
    """
    The document an input lives in.

    `url` is the current address (only its query string is read).
    navigate() records the destination in `navigations` and hands it to
    `on_navigate` when one is set; actually leaving the page is up to the
    host.
    """

    def __init__(self, url: str = "/", on_navigate: Optional[Callable[[str], None]] = None) -> None:
        super().__init__()
        self.url = url
        self.body = Element("body", page=self)
        self.on_navigate = on_navigate
        self.navigations: List[str] = []

    def create_element(self, tag: str) -> Element:
        return Element(tag, page=self)

    def get_element_by_id(self, element_id: str) -> Optional[Element]:
        for e in self.body.iter():
            if e.id == element_id:
                return e
        return None

    def query_param(self, name: str) -> Optional[str]:
        values = parse_qs(urlsplit(self.url).query).get(name)
        return values[0] if values else None

    def navigate(self, href: str) -> None:
        self.navigations.append(href)
        if self.on_navigate is not None:
            self.on_navigate(href)
