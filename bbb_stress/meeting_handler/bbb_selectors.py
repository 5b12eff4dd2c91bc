"""
BigBlueButton-specific element matchers and JavaScript for the join flow.

Each UI affordance is described by an ordered tuple of matchers tried as a
disjunction: the first matcher that finds an element wins. Several matchers
per affordance keep the join flow working across BBB client releases that
rename labels or classes.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple


@dataclass(frozen=True)
class ElementMatcher:
    """One way of recognising an element in the page."""
    kind: str
    value: str

    @property
    def selector(self) -> str:
        """CSS selector for this matcher."""
        if self.kind == "aria_label":
            return f'[aria-label="{self.value}"]'
        if self.kind == "class_fragment":
            return f'[class*="{self.value}"]'
        return self.value

    def __str__(self) -> str:
        return self.selector


def aria_label(label: str) -> ElementMatcher:
    """Match an element whose aria-label is exactly ``label``."""
    return ElementMatcher("aria_label", label)


def class_fragment(fragment: str) -> ElementMatcher:
    """Match an element whose class attribute contains ``fragment``."""
    return ElementMatcher("class_fragment", fragment)


def css(selector: str) -> ElementMatcher:
    """Match a raw CSS selector."""
    return ElementMatcher("css", selector)


def any_of(matchers: Sequence[ElementMatcher]) -> str:
    """Combined selector matching any of ``matchers``."""
    return ",".join(m.selector for m in matchers)


Matchers = Tuple[ElementMatcher, ...]

# =============================================================================
# JOIN FLOW MATCHERS
# =============================================================================

# Audio modal: "Listen only" button
LISTEN_ONLY: Matchers = (
    aria_label("Listen only"),
    class_fragment("audio"),
)

# Mute/unmute toggle in the action bar
MUTE_TOGGLE: Matchers = (
    aria_label("Mute"),
    aria_label("Unmute"),
    aria_label("Audio"),
    class_fragment("mute"),
)

# Webcam
SHARE_WEBCAM: Matchers = (aria_label("Share webcam"),)
START_SHARING: Matchers = (aria_label("Start sharing"),)
CAMERA_OPTION: Matchers = (css("#setCam > option"),)

# Modal overlay left over by the echo test
AUDIO_MODAL_OVERLAY = ".ReactModal__Overlay"

# =============================================================================
# JAVASCRIPT
# =============================================================================

# Clicks every close button inside open modals; returns how many were clicked
CLOSE_MODALS_JS = """
() => {
    const buttons = document.querySelectorAll('.ReactModal__Overlay [aria-label="Close"]');
    buttons.forEach(button => button.click());
    return buttons.length;
}
"""
