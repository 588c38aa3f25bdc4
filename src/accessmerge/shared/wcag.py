"""WCAG success criteria reference data used to enrich normalized issues."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from accessmerge.schemas.issues import CanonicalIssue, WcagLevel, WcagPrinciple

UNDERSTANDING_URL = "https://www.w3.org/WAI/WCAG22/Understanding/{slug}.html"
QUICKREF_URL = "https://www.w3.org/WAI/WCAG22/quickref/"

PRINCIPLES: dict[str, WcagPrinciple] = {
    "1": WcagPrinciple.PERCEIVABLE,
    "2": WcagPrinciple.OPERABLE,
    "3": WcagPrinciple.UNDERSTANDABLE,
    "4": WcagPrinciple.ROBUST,
}


class WcagCriterion(BaseModel):
    """Static description of one success criterion."""

    model_config = ConfigDict(frozen=True)

    criterion: str
    title: str
    level: WcagLevel
    slug: str
    affected_users: tuple[str, ...]
    impact: str
    solutions: tuple[str, ...] = ()

    @property
    def principle(self) -> WcagPrinciple:
        return PRINCIPLES[self.criterion[0]]

    @property
    def url(self) -> str:
        return UNDERSTANDING_URL.format(slug=self.slug)


def _c(criterion, title, level, slug, users, impact, solutions=()):
    return WcagCriterion(
        criterion=criterion,
        title=title,
        level=WcagLevel(level),
        slug=slug,
        affected_users=tuple(users),
        impact=impact,
        solutions=tuple(solutions),
    )


WCAG_CRITERIA: dict[str, WcagCriterion] = {
    c.criterion: c
    for c in (
        _c("1.1.1", "Non-text Content", "A", "non-text-content",
           ["screen-reader"],
           "Screen reader users get no information from images or icons that lack a text alternative.",
           ["Add a descriptive alt attribute to informative images",
            "Use alt=\"\" for purely decorative images"]),
        _c("1.2.2", "Captions (Prerecorded)", "A", "captions-prerecorded",
           ["cognitive"],
           "Deaf and hard-of-hearing users cannot follow audio content without captions.",
           ["Provide synchronized captions for prerecorded video"]),
        _c("1.3.1", "Info and Relationships", "A", "info-and-relationships",
           ["screen-reader", "cognitive"],
           "Structure conveyed only visually (headings, lists, labels) is lost to assistive technology.",
           ["Use semantic elements for headings, lists and tables",
            "Associate every form control with a label"]),
        _c("1.4.1", "Use of Color", "A", "use-of-color",
           ["color-blind", "low-vision"],
           "Users who cannot distinguish colors miss information conveyed by color alone.",
           ["Add a non-color cue such as an icon, underline or text"]),
        _c("1.4.3", "Contrast (Minimum)", "AA", "contrast-minimum",
           ["low-vision", "color-blind"],
           "Low-contrast text is hard or impossible to read for users with low vision.",
           ["Increase the contrast between text and background to at least 4.5:1"]),
        _c("1.4.6", "Contrast (Enhanced)", "AAA", "contrast-enhanced",
           ["low-vision", "color-blind"],
           "Users with moderate vision loss need stronger contrast than the AA minimum.",
           ["Increase the contrast between text and background to at least 7:1"]),
        _c("1.4.11", "Non-text Contrast", "AA", "non-text-contrast",
           ["low-vision"],
           "Low-contrast borders and icons make controls hard to find.",
           ["Give UI component boundaries and icons at least 3:1 contrast"]),
        _c("2.1.1", "Keyboard", "A", "keyboard",
           ["keyboard-only", "motor-impaired"],
           "Functionality that needs a mouse is unavailable to keyboard and switch users.",
           ["Use native interactive elements such as button and a",
            "Add keyboard handlers alongside mouse handlers"]),
        _c("2.2.2", "Pause, Stop, Hide", "A", "pause-stop-hide",
           ["cognitive"],
           "Moving or blinking content distracts users with attention disorders.",
           ["Let users pause, stop or hide moving content"]),
        _c("2.4.1", "Bypass Blocks", "A", "bypass-blocks",
           ["keyboard-only", "screen-reader"],
           "Without a way to skip repeated blocks, keyboard users tab through every navigation link.",
           ["Add a skip link or landmark regions"]),
        _c("2.4.2", "Page Titled", "A", "page-titled",
           ["screen-reader", "cognitive"],
           "A missing page title makes it hard to identify the page among open tabs.",
           ["Give every page a unique, descriptive title element"]),
        _c("2.4.3", "Focus Order", "A", "focus-order",
           ["keyboard-only", "screen-reader"],
           "An illogical focus order disorients keyboard and screen reader users.",
           ["Avoid positive tabindex values", "Keep DOM order consistent with visual order"]),
        _c("2.4.4", "Link Purpose (In Context)", "A", "link-purpose-in-context",
           ["screen-reader", "cognitive"],
           "Links without meaningful text cannot be understood out of context.",
           ["Give every link text that describes its destination"]),
        _c("2.4.7", "Focus Visible", "AA", "focus-visible",
           ["keyboard-only", "low-vision"],
           "Keyboard users lose track of where they are when focus is not visible.",
           ["Do not remove focus outlines without a visible replacement"]),
        _c("3.1.1", "Language of Page", "A", "language-of-page",
           ["screen-reader"],
           "Screen readers mispronounce content when the page language is not declared.",
           ["Set the lang attribute on the html element"]),
        _c("3.2.2", "On Input", "A", "on-input",
           ["cognitive", "screen-reader"],
           "Unexpected context changes on input confuse users.",
           ["Do not change context automatically when a form value changes"]),
        _c("3.3.2", "Labels or Instructions", "A", "labels-or-instructions",
           ["screen-reader", "cognitive"],
           "Users cannot complete forms when fields lack labels or instructions.",
           ["Provide a visible label for each input"]),
        _c("4.1.2", "Name, Role, Value", "A", "name-role-value",
           ["screen-reader"],
           "Custom controls without a proper name, role or state are unusable with assistive technology.",
           ["Use valid ARIA roles and attributes",
            "Prefer native HTML elements over ARIA widgets"]),
    )
}


def get_criterion(criterion: str | None) -> WcagCriterion | None:
    if not criterion:
        return None
    return WCAG_CRITERIA.get(criterion)


def principle_for(criterion: str) -> WcagPrinciple:
    """Principle from the first digit of a criterion number."""
    return PRINCIPLES.get(criterion[:1], WcagPrinciple.PERCEIVABLE)


def criterion_url(criterion: str) -> str:
    info = get_criterion(criterion)
    return info.url if info else QUICKREF_URL


def enrich_issue(issue: CanonicalIssue) -> CanonicalIssue:
    """Fill in missing title, URL, context and audience from the criteria table.

    Fields the engine already set are left alone. Returns a new issue.
    """
    info = get_criterion(issue.wcag.criterion if issue.wcag else None)
    if info is None:
        return issue

    update: dict = {}
    wcag_update = {}
    if not issue.wcag.title:
        wcag_update["title"] = info.title
    if not issue.wcag.url:
        wcag_update["url"] = info.url
    if wcag_update:
        update["wcag"] = issue.wcag.model_copy(update=wcag_update)
    if not issue.human_context:
        update["human_context"] = f"{info.title} (WCAG {info.criterion}, level {info.level.value}): {info.impact}"
    if not issue.suggested_actions and info.solutions:
        update["suggested_actions"] = list(info.solutions)
    if not issue.affected_users:
        update["affected_users"] = list(info.affected_users)

    return issue.model_copy(update=update) if update else issue
