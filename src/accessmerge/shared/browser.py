"""Playwright browser manager — loads targets, extracts color samples, runs axe-core."""

from __future__ import annotations

import logging
from pathlib import Path
from types import TracebackType
from typing import Any

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from accessmerge.schemas.config import BrowserConfig
from accessmerge.schemas.contrast import ElementSample

logger = logging.getLogger(__name__)

_SSL_ARGS = ["--ignore-certificate-errors", "--ignore-ssl-errors"]

_AXE_TAGS = {
    "A": ["wcag2a", "wcag21a", "wcag22a", "best-practice"],
    "AA": ["wcag2a", "wcag21a", "wcag22a", "best-practice", "wcag2aa", "wcag21aa", "wcag22aa"],
    "AAA": [
        "wcag2a", "wcag21a", "wcag22a", "best-practice",
        "wcag2aa", "wcag21aa", "wcag22aa",
        "wcag2aaa", "wcag21aaa", "wcag22aaa",
    ],
}

# Collects visible elements that own direct text, resolving the effective
# background by walking up the ancestors (white when all are transparent).
_EXTRACT_SAMPLES_JS = r"""(scopeSelector) => {
    const root = scopeSelector ? document.querySelector(scopeSelector) : document.body;
    if (!root) return [];
    const skip = new Set(['SCRIPT', 'STYLE', 'NOSCRIPT', 'SVG', 'PATH']);

    const effectiveBackground = (el) => {
        let node = el;
        while (node && node.nodeType === 1) {
            const bg = getComputedStyle(node).backgroundColor;
            if (bg && bg !== 'rgba(0, 0, 0, 0)' && bg !== 'transparent') return bg;
            node = node.parentElement;
        }
        return 'rgb(255, 255, 255)';
    };

    const selectorFor = (el) => {
        if (el.id) return '#' + el.id;
        const tag = el.tagName.toLowerCase();
        const classes = [...el.classList].join('.');
        return classes ? tag + '.' + classes : tag;
    };

    const samples = [];
    for (const el of [root, ...root.querySelectorAll('*')]) {
        if (skip.has(el.tagName.toUpperCase())) continue;
        const hasText = [...el.childNodes].some(
            (n) => n.nodeType === 3 && n.textContent.trim().length > 0
        );
        if (!hasText) continue;
        const style = getComputedStyle(el);
        const rect = el.getBoundingClientRect();
        if (style.display === 'none' || style.visibility === 'hidden' || rect.width === 0 || rect.height === 0) continue;
        samples.push({
            selector: selectorFor(el),
            snippet: el.outerHTML.slice(0, 300),
            foreground: style.color,
            background: effectiveBackground(el),
            font_size_px: parseFloat(style.fontSize),
            font_weight: parseInt(style.fontWeight, 10) || 400,
        });
    }
    return samples;
}"""

_RUN_AXE_JS = """(tags) => axe.run(document, { runOnly: { type: 'tag', values: tags } })"""


class BrowserManager:
    """Manages a Playwright Chromium instance built from a ``BrowserConfig``.

    Usage::

        async with BrowserManager(config.browser) as bm:
            samples = await bm.extract_color_samples("https://example.com")
            axe_results = await bm.run_axe("https://example.com")

    The caller owns the instance; nothing is cached at module level.
    """

    def __init__(self, config: BrowserConfig | None = None) -> None:
        self.config = config or BrowserConfig()
        self._pw: Playwright | None = None
        self._browser: Browser | None = None

    async def __aenter__(self) -> "BrowserManager":
        self._pw = await async_playwright().start()
        self._browser = await self._pw.chromium.launch(
            headless=self.config.headless,
            args=_SSL_ARGS if self.config.ignore_https_errors else [],
        )
        logger.info("Browser launched (headless=%s)", self.config.headless)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._browser:
            await self._browser.close()
        if self._pw:
            await self._pw.stop()
        logger.info("Browser closed")

    async def _new_context(self) -> BrowserContext:
        assert self._browser is not None, "BrowserManager not entered"
        return await self._browser.new_context(
            ignore_https_errors=self.config.ignore_https_errors,
            viewport={
                "width": self.config.viewport.width,
                "height": self.config.viewport.height,
            },
        )

    async def _load(self, page: Page, target: str) -> None:
        """Navigate to a URL, or open a local HTML file."""
        if target.startswith(("http://", "https://", "file://")):
            url = target
        else:
            url = Path(target).resolve().as_uri()
        await page.goto(url, wait_until="load", timeout=self.config.timeout_ms)

    async def extract_color_samples(
        self,
        target: str,
        *,
        scope_selector: str | None = None,
    ) -> list[ElementSample]:
        """Return one sample per visible element with direct text content."""
        context = await self._new_context()
        try:
            page = await context.new_page()
            await self._load(page, target)
            raw = await page.evaluate(_EXTRACT_SAMPLES_JS, scope_selector)
        finally:
            await context.close()

        logger.debug("Extracted %d color sample(s) from %s", len(raw), target)
        return [ElementSample.model_validate(item) for item in raw]

    async def run_axe(self, target: str, *, level: str = "AA") -> dict[str, Any]:
        """Inject axe-core into the page and return its raw results object."""
        context = await self._new_context()
        try:
            page = await context.new_page()
            await self._load(page, target)
            await page.add_script_tag(url=self.config.axe_script_url)
            return await page.evaluate(_RUN_AXE_JS, _AXE_TAGS[level])
        finally:
            await context.close()
