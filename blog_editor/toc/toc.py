"""Table-of-contents generation for rendered post pages.

Works on the HTML the site generator produced: every h1/h2/h3 inside the
main content region gets a stable id, a navigation list mirroring the
headings is appended to the `#toc` element, and `ScrollSpy` tracks which
entry is active as headings cross the upper part of the viewport.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag

CONTENT_SELECTOR = ".main-content"
TOC_ELEMENT_ID = "toc"
HEADING_TAGS = ("h1", "h2", "h3")
ACTIVE_CLASS = "active"

# observer trigger region: skip the top 100px, ignore the lower 60% of the viewport
OBSERVER_ROOT_MARGIN = "-100px 0px -60% 0px"
OBSERVER_THRESHOLD = 0

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True, slots=True)
class TocEntry:
    level: int
    id: str
    text: str


@dataclass(frozen=True, slots=True)
class Intersection:
    """One viewport-intersection callback entry."""

    target_id: str
    is_intersecting: bool


def collect_headings(soup: BeautifulSoup, container: str = CONTENT_SELECTOR) -> list[Tag]:
    selector = ", ".join(f"{container} {tag}" for tag in HEADING_TAGS)
    return list(soup.select(selector))


def derive_heading_id(text: str) -> str:
    return _WHITESPACE.sub("-", text.strip())


def assign_heading_ids(headings: Iterable[Tag], id_counter: dict[str, int]) -> None:
    """Give every heading without an id one derived from its text.

    `id_counter` maps a derived id to the last suffix handed out for it. The
    first heading with a given text keeps the bare id, later ones get
    `-1`, `-2`, ... Headings that already carry an id are left alone.
    """
    for heading in headings:
        if heading.get("id"):
            continue

        base_id = derive_heading_id(heading.get_text())
        if base_id in id_counter:
            id_counter[base_id] += 1
            heading["id"] = f"{base_id}-{id_counter[base_id]}"
        else:
            heading["id"] = base_id
            id_counter[base_id] = 0


def build_toc(soup: BeautifulSoup, container: str = CONTENT_SELECTOR,
              toc_id: str = TOC_ELEMENT_ID) -> list[TocEntry]:
    """Assign heading ids and append the navigation list to the toc element.

    Returns the entries in document order, or an empty list when the page has
    no toc element or no headings (the document is then left untouched).
    """
    toc = soup.find(id=toc_id)
    headings = collect_headings(soup, container)

    if toc is None or not headings:
        return []

    assign_heading_ids(headings, {})

    ul = soup.new_tag("ul")
    ul["data-root-margin"] = OBSERVER_ROOT_MARGIN
    ul["data-threshold"] = str(OBSERVER_THRESHOLD)
    toc.append(ul)

    entries: list[TocEntry] = []
    for heading in headings:
        heading_id = str(heading["id"])
        text = heading.get_text()

        li = soup.new_tag("li")
        li["class"] = [f"toc-{heading.name.lower()}"]

        a = soup.new_tag("a", href=f"#{heading_id}")
        a.string = text

        li.append(a)
        ul.append(li)
        entries.append(TocEntry(level=int(heading.name[1]), id=heading_id, text=text))

    return entries


def render_toc(html: str | bytes) -> str:
    soup = BeautifulSoup(html, "html.parser")
    build_toc(soup)
    return str(soup)


class ScrollSpy:
    """Highlights the navigation link of the heading last seen entering view.

    Links are keyed by the heading id they point at. At most one link carries
    the active class; the last intersecting entry of a callback batch wins.
    """

    def __init__(self, links: dict[str, Tag]) -> None:
        self.links = links
        self.active_id: str | None = None

    @classmethod
    def for_toc(cls, toc: Tag) -> ScrollSpy:
        links: dict[str, Tag] = {}
        for a in toc.select("li > a[href^='#']"):
            links[str(a["href"])[1:]] = a
        return cls(links)

    def observe(self, entries: Iterable[Intersection]) -> str | None:
        for entry in entries:
            if not entry.is_intersecting:
                continue

            for link in self.links.values():
                _remove_class(link, ACTIVE_CLASS)

            link = self.links.get(entry.target_id)
            if link is not None:
                _add_class(link, ACTIVE_CLASS)
                self.active_id = entry.target_id
            else:
                self.active_id = None

        return self.active_id


def _add_class(tag: Tag, name: str) -> None:
    classes = list(tag.get("class") or [])
    if name not in classes:
        classes.append(name)
    tag["class"] = classes


def _remove_class(tag: Tag, name: str) -> None:
    classes = [c for c in (tag.get("class") or []) if c != name]
    if classes:
        tag["class"] = classes
    elif tag.has_attr("class"):
        del tag["class"]
