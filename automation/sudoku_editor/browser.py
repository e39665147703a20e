"""Headless-browser host for the layout engine.

Renders the grid page in Chromium via Playwright and answers the
synchronizer's width queries from the live DOM.  Before every
measurement the current ``LayoutStyle`` is pushed into the page's
``<style id="layout-style">`` sheet, so each read sees every rule
written so far.
"""

from __future__ import annotations

from typing import Any, Mapping

from playwright.async_api import Browser, Page, Playwright, async_playwright

from . import _layout_sizes as sizes
from .render import render_html
from .stylesheet import LayoutStyle

_VIEWPORT = {"width": 900, "height": 1000}

_SYNC_RULES_JS = """
({id, rules}) => {
  const sheet = document.getElementById(id).sheet;
  while (sheet.cssRules.length) {
    sheet.deleteRule(0);
  }
  rules.forEach((rule, i) => sheet.insertRule(rule, i));
  return sheet.cssRules.length;
}
"""

_CONTENT_WIDTH_JS = """
(selector) => {
  const el = document.querySelector(selector);
  return el ? parseFloat(getComputedStyle(el).width) : null;
}
"""

_OFFSET_WIDTH_JS = """
(selector) => {
  const el = document.querySelector(selector);
  return el ? el.offsetWidth : null;
}
"""


class BrowserMeasurer:
    """``Measurer`` backed by a Playwright page."""

    def __init__(self, page: Page, style: LayoutStyle) -> None:
        self.page = page
        self.style = style

    async def _sync_rules(self) -> None:
        await self.page.evaluate(
            _SYNC_RULES_JS, {"id": sizes.STYLE_ELEMENT_ID, "rules": list(self.style.rules)},
        )

    async def _measure(self, script: str, selector: str) -> float:
        await self._sync_rules()
        value = await self.page.evaluate(script, selector)
        if value is None:
            raise RuntimeError(f"Nothing to measure: no element matches {selector!r}")
        return float(value)

    async def container_width(self) -> float:
        return await self._measure(_CONTENT_WIDTH_JS, f"#{sizes.CONTAINER_ID}")

    async def cell_width(self) -> float:
        return await self._measure(
            _CONTENT_WIDTH_JS, f"#{sizes.CONTAINER_ID} .{sizes.CELL_CLASS}",
        )

    async def row_width(self) -> float:
        return await self._measure(
            _OFFSET_WIDTH_JS, f"#{sizes.ROW_ID_PREFIX}0 .{sizes.CELL_CLASS}",
        )


class BrowserPreview:
    """Owns one headless browser page showing the current grid.

    Use as ``async with BrowserPreview(style) as preview:`` or call
    ``start`` / ``close`` explicitly.
    """

    def __init__(self, style: LayoutStyle, *, headless: bool = True) -> None:
        self.style = style
        self.headless = headless
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._page: Page | None = None

    @property
    def started(self) -> bool:
        return self._page is not None

    @property
    def page(self) -> Page:
        if self._page is None:
            raise RuntimeError("Browser preview is not started")
        return self._page

    @property
    def measurer(self) -> BrowserMeasurer:
        return BrowserMeasurer(self.page, self.style)

    async def start(self) -> None:
        if self.started:
            return
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(headless=self.headless)
            context = await self._browser.new_context(viewport=_VIEWPORT)
            self._page = await context.new_page()
        except BaseException:
            await self.close()
            raise

    async def close(self) -> None:
        if self._browser is not None:
            await self._browser.close()
        if self._playwright is not None:
            await self._playwright.stop()
        self._browser = None
        self._playwright = None
        self._page = None

    async def show(
        self,
        grid_size: int,
        givens: Mapping[str, int],
        solution: Mapping[str, int] | None = None,
    ) -> None:
        """Load a fresh page for the grid, carrying over the current rules."""
        await self.page.set_content(
            render_html(grid_size, givens, solution, css=self.style.css_text()),
        )

    async def __aenter__(self) -> BrowserPreview:
        await self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()
