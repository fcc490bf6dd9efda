# =============================================================================
# Split: move the tabs right of the active tab into a new window
# =============================================================================

from dataclasses import dataclass
from enum import Enum
from uuid import uuid4

from loguru import logger

from .errors import Error, ErrorReport, ErrorType
from .host import APPEND, WindowingHost
from .logging_config import trace_id_var
from .models import Tab, sorted_by_position


class SplitPhase(Enum):
    CREATED = "created"        # destination window exists, nothing moved yet
    POPULATED = "populated"    # split tabs live in the destination
    CLEANED = "cleaned"        # placeholder tab removed


@dataclass(frozen=True)
class SplitPlan:
    source_window_id: object
    active_tab: Tab
    tabs_to_move: tuple[Tab, ...]

    @property
    def tab_ids(self) -> list:
        return [tab.tab_id for tab in self.tabs_to_move]


@dataclass
class SplitTransaction:
    """
    Destination window of a split in progress.

    Rollback depends only on the phase reached: while CREATED the destination
    holds nothing but its placeholder and is removed; from POPULATED on the
    user's tabs are in it and it is never touched.
    """
    host: WindowingHost
    destination_id: object
    phase: SplitPhase = SplitPhase.CREATED
    placeholder_id: object = None

    async def rollback(self, report: ErrorReport) -> bool:
        if self.phase is not SplitPhase.CREATED:
            return False
        try:
            await self.host.remove_window(self.destination_id)
        except Exception as e:
            report.add_error(Error(
                error_type=ErrorType.COMPENSATION_ERROR,
                message=f"Failed to remove destination window {self.destination_id}",
                context={
                    "window_id": self.destination_id,
                    "phase": self.phase.value,
                    "error": str(e),
                    "exception_type": type(e).__name__
                },
                original_exception=e
            ))
            return False
        logger.info(
            "Destination window rolled back",
            operation="split_tabs",
            status="rolled_back",
            window_id=self.destination_id
        )
        return True


async def plan_split(host: WindowingHost, window_id=None) -> SplitPlan | None:
    """
    Read the source window and decide which tabs move.

    Returns:
        SplitPlan, or None when there is nothing to split (no active tab,
        or the active tab is already the last one)
    """
    if window_id is None:
        window_id = (await host.get_current_window()).window_id

    active_tabs = await host.query_tabs(active_only=True, window_id=window_id)
    if not active_tabs:
        return None
    active_tab = active_tabs[0]

    all_tabs = sorted_by_position(await host.query_tabs(window_id=window_id))
    tabs_to_move = tuple(tab for tab in all_tabs if tab.index > active_tab.index)
    if not tabs_to_move:
        return None

    return SplitPlan(
        source_window_id=window_id,
        active_tab=active_tab,
        tabs_to_move=tabs_to_move,
    )


async def execute_split(host: WindowingHost, plan: SplitPlan, report: ErrorReport) -> SplitTransaction:
    """Create the destination window, fill it, and drop its placeholder tab."""
    # Blank window: its placeholder tab is discovered below, never seeded
    window = await host.create_window()
    txn = SplitTransaction(host=host, destination_id=window.window_id)

    try:
        initial_tabs = sorted_by_position(await host.query_tabs(window_id=txn.destination_id))
    except Exception as e:
        report.add_error(Error(
            error_type=ErrorType.UNEXPECTED_ERROR,
            message=f"Failed to read tabs of new window {txn.destination_id}",
            context={
                "window_id": txn.destination_id,
                "phase": txn.phase.value,
                "error": str(e),
                "exception_type": type(e).__name__
            },
            original_exception=e
        ))
        await txn.rollback(report)
        return txn

    if not initial_tabs:
        report.add_error(Error(
            error_type=ErrorType.INCONSISTENT_STATE,
            message=f"New window {txn.destination_id} has no placeholder tab",
            context={"window_id": txn.destination_id, "phase": txn.phase.value}
        ))
        await txn.rollback(report)
        return txn
    txn.placeholder_id = initial_tabs[0].tab_id

    try:
        await host.move_tabs(plan.tab_ids, txn.destination_id, APPEND)
    except Exception as e:
        report.add_error(Error(
            error_type=ErrorType.RELOCATION_ERROR,
            message=f"Failed to move tabs into window {txn.destination_id}",
            context={
                "window_id": txn.destination_id,
                "source_window_id": plan.source_window_id,
                "tab_ids": plan.tab_ids,
                "phase": txn.phase.value,
                "error": str(e),
                "exception_type": type(e).__name__
            },
            original_exception=e
        ))
        await txn.rollback(report)
        return txn

    txn.phase = SplitPhase.POPULATED

    try:
        await host.remove_tab(txn.placeholder_id)
    except Exception as e:
        # Tabs already moved: leave the window alone, only the placeholder remains
        report.add_warning(Error(
            error_type=ErrorType.CLEANUP_ERROR,
            message=f"Failed to remove placeholder tab {txn.placeholder_id}",
            context={
                "window_id": txn.destination_id,
                "tab_id": txn.placeholder_id,
                "phase": txn.phase.value,
                "error": str(e),
                "exception_type": type(e).__name__
            },
            original_exception=e
        ))
        return txn

    txn.phase = SplitPhase.CLEANED
    return txn


async def split_tabs(host: WindowingHost, window_id=None) -> ErrorReport:
    """
    Move every tab right of the active tab into a new window.

    Never raises: failures are logged and collected in the returned report.

    Args:
        host: Windowing host to operate on
        window_id: Source window; the current window when omitted

    Returns:
        ErrorReport for this invocation
    """
    op_trace_id = str(uuid4())
    token = trace_id_var.set(op_trace_id)
    report = ErrorReport(operation="split_tabs")
    stage = "plan"

    logger.info(
        "Split starting",
        operation="split_tabs",
        status="started",
        trace_id=op_trace_id,
        window_id=window_id
    )

    try:
        plan = await plan_split(host, window_id)
        if plan is None:
            logger.info(
                "Nothing to split",
                operation="split_tabs",
                status="noop",
                trace_id=op_trace_id,
                window_id=window_id
            )
            return report

        stage = "execute"
        txn = await execute_split(host, plan, report)
        tabs_moved = 0
        if txn.phase is SplitPhase.CREATED:
            report.failed.append(txn.destination_id)
        else:
            report.completed.append(txn.destination_id)
            tabs_moved = len(plan.tabs_to_move)
        logger.info(
            "Split finished",
            operation="split_tabs",
            status=txn.phase.value,
            trace_id=op_trace_id,
            source_window_id=plan.source_window_id,
            window_id=txn.destination_id,
            metrics={"tabs_moved": tabs_moved}
        )
    except Exception as e:
        report.add_error(Error(
            error_type=ErrorType.UNEXPECTED_ERROR,
            message="Unexpected error while splitting tabs",
            context={
                "window_id": window_id,
                "phase": stage,
                "error": str(e),
                "exception_type": type(e).__name__
            },
            original_exception=e
        ))
    finally:
        report.log_summary(op_trace_id)
        trace_id_var.reset(token)

    return report
