"""
Best-effort form interaction that runs after the latency has been measured.

Every sub-step returns a StepOutcome instead of raising. A failing field,
dropdown or submit is logged and recorded; the session's measurement stays
as it is.
"""

import asyncio
import logging
import random
from typing import Any, Awaitable, Callable, List, Optional

from ..config import LoadTestConfig
from .models import StepOutcome

log = logging.getLogger(__name__)


async def best_effort(
    name: str,
    action: Callable[[], Awaitable[Optional[str]]],
    log_identifier: str,
) -> StepOutcome:
    """Run ``action`` and turn its result or exception into a StepOutcome."""
    try:
        detail = await action()
    except Exception as e:
        log.info("%s %s failed: %s", log_identifier, name, e)
        return StepOutcome(name=name, ok=False, detail=str(e))
    log.debug("%s %s ok %s", log_identifier, name, detail or "")
    return StepOutcome(name=name, ok=True, detail=detail or "")


def _random_value() -> str:
    # Digits only; some form fields are converted to integers server-side.
    return str(random.randrange(1_000_000))


async def fill_text_fields(page: Any, config: LoadTestConfig, log_identifier: str) -> List[StepOutcome]:
    """Fill every visible text input and textarea in the modal with a random number."""
    modal = page.locator(config.selectors.modal)
    fields = await modal.locator(config.selectors.text_fields).all()

    outcomes = []
    for position, field in enumerate(fields):

        async def _fill(field=field, position=position) -> str:
            key = (
                await field.get_attribute("name")
                or await field.get_attribute("id")
                or f"field-{position}"
            )
            value = _random_value()
            await field.fill(value)
            log.info("%s Filled text field %s with %s", log_identifier, key, value)
            return key

        outcomes.append(await best_effort(f"fill_text_field[{position}]", _fill, log_identifier))
    return outcomes


async def select_choices(page: Any, config: LoadTestConfig, log_identifier: str) -> List[StepOutcome]:
    """Open every visible choices.js dropdown and pick its first selectable option."""
    selectors = config.selectors
    modal = page.locator(selectors.modal)
    containers = await modal.locator(selectors.choices_container).all()

    outcomes = []
    for position, container in enumerate(containers):

        async def _select(container=container) -> str:
            await container.click()
            await page.wait_for_selector(selectors.choices_option, timeout=config.timeouts.click)
            await page.locator(selectors.choices_option).first.click()
            return "first option"

        outcomes.append(await best_effort(f"select_choice[{position}]", _select, log_identifier))
    return outcomes


async def click_control(page: Any, selector: str, timeout_ms: int) -> str:
    scope = page.locator(selector)
    await scope.first.click(timeout=timeout_ms)
    return selector


async def await_confirmation(page: Any, selector: str, timeout_ms: int) -> str:
    await page.wait_for_selector(selector, timeout=timeout_ms)
    return "confirmation shown"


async def fill_rich_text_editor(page: Any, config: LoadTestConfig, log_identifier: str) -> str:
    modal = page.locator(config.selectors.modal)
    editor = modal.locator(config.selectors.rich_text_editor)
    if await editor.count() == 0:
        log.info("%s No rich-text editor in second form; skipping fill", log_identifier)
        return "no editor"

    text = f"Automated test content: {_random_value()}"
    await editor.first.click()
    await editor.first.fill(text)
    log.info("%s Filled second form editor with: %s", log_identifier, text)
    return text


async def run_interactions(page: Any, config: LoadTestConfig, log_identifier: str) -> List[StepOutcome]:
    """
    Fill and submit the task form, then the optional follow-up form.

    Returns one StepOutcome per sub-step that ran, in order.
    """
    selectors = config.selectors
    timeouts = config.timeouts
    outcomes: List[StepOutcome] = []

    # Form scripts finish loading their data sources after the modal appears.
    await asyncio.sleep(timeouts.settle / 1000)

    outcomes.extend(await fill_text_fields(page, config, log_identifier))
    outcomes.extend(await select_choices(page, config, log_identifier))

    outcomes.append(
        await best_effort(
            "submit_first_form",
            lambda: click_control(page, selectors.first_submit, timeouts.click),
            log_identifier,
        )
    )
    confirmation = await best_effort(
        "confirm_first_form",
        lambda: await_confirmation(page, selectors.confirmation, timeouts.confirmation),
        log_identifier,
    )
    outcomes.append(confirmation)
    if confirmation.ok:
        log.info("%s Form submitted successfully", log_identifier)
    else:
        log.info("%s No confirmation detected", log_identifier)

    if not config.second_form:
        return outcomes

    log.info("%s Waiting for second form", log_identifier)

    async def _second_modal() -> str:
        await page.wait_for_selector(selectors.modal, state="visible", timeout=timeouts.confirmation)
        await asyncio.sleep(timeouts.settle / 1000)
        return "visible"

    second_modal = await best_effort("await_second_form", _second_modal, log_identifier)
    outcomes.append(second_modal)
    if not second_modal.ok:
        return outcomes

    outcomes.append(
        await best_effort(
            "fill_second_form",
            lambda: fill_rich_text_editor(page, config, log_identifier),
            log_identifier,
        )
    )
    outcomes.append(
        await best_effort(
            "submit_second_form",
            lambda: click_control(page, selectors.second_submit, timeouts.click),
            log_identifier,
        )
    )
    second_confirmation = await best_effort(
        "confirm_second_form",
        lambda: await_confirmation(page, selectors.second_confirmation, timeouts.confirmation),
        log_identifier,
    )
    outcomes.append(second_confirmation)
    if not second_confirmation.ok:
        log.info("%s No second confirmation detected", log_identifier)

    return outcomes
