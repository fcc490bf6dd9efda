# =============================================================================
# Merge: pull every other window's tabs into one target window
# =============================================================================

from dataclasses import dataclass
from uuid import uuid4

from loguru import logger

from .errors import Error, ErrorReport, ErrorType
from .host import APPEND, WindowingHost
from .logging_config import trace_id_var
from .models import Snapshot, Window

MERGE_TARGET_CURRENT = "current"
MERGE_TARGET_FIRST = "first"
MERGE_TARGET_POLICIES = (MERGE_TARGET_CURRENT, MERGE_TARGET_FIRST)


@dataclass(frozen=True)
class MergePlan:
    target_window_id: object
    sources: tuple[Window, ...]


async def plan_merge(
    host: WindowingHost,
    window_id=None,
    target_policy: str = MERGE_TARGET_CURRENT,
) -> tuple[MergePlan | None, Snapshot]:
    """
    Resolve the target window and build the merge set from one snapshot.

    Returns:
        (plan, snapshot); plan is None when no other window holds tabs
    """
    if target_policy not in MERGE_TARGET_POLICIES:
        raise ValueError(f"Unknown merge target policy: {target_policy}")

    if window_id is None and target_policy == MERGE_TARGET_CURRENT:
        window_id = (await host.get_current_window()).window_id

    snapshot = Snapshot(windows=tuple(await host.get_all_windows(populate_tabs=True)))

    if window_id is None:
        if not snapshot.windows:
            return None, snapshot
        window_id = snapshot.windows[0].window_id

    sources = tuple(snapshot.non_empty_windows_except(window_id))
    if not sources:
        return None, snapshot
    return MergePlan(target_window_id=window_id, sources=sources), snapshot


async def merge_window(host: WindowingHost, source: Window, target_window_id, report: ErrorReport) -> bool:
    """Move one source window's tabs to the end of the target and close it."""
    step = "move_tabs"
    try:
        await host.move_tabs(source.tab_ids, target_window_id, APPEND)
        step = "remove_window"
        await host.remove_window(source.window_id)
    except Exception as e:
        report.failed.append(source.window_id)
        report.add_error(Error(
            error_type=ErrorType.RELOCATION_ERROR if step == "move_tabs" else ErrorType.CLEANUP_ERROR,
            message=f"Failed to merge window {source.window_id}",
            context={
                "window_id": source.window_id,
                "target_window_id": target_window_id,
                "phase": step,
                "tab_ids": source.tab_ids,
                "error": str(e),
                "exception_type": type(e).__name__
            },
            original_exception=e
        ))
        return False

    report.completed.append(source.window_id)
    logger.debug(
        "Window merged",
        operation="merge_windows",
        status="merged",
        window_id=source.window_id,
        target_window_id=target_window_id,
        metrics={"tabs_moved": len(source.tabs)}
    )
    return True


async def merge_windows(
    host: WindowingHost,
    window_id=None,
    target_policy: str = MERGE_TARGET_CURRENT,
) -> ErrorReport:
    """
    Merge the tabs of all other windows into one window.

    Each source window is merged on its own: a failure is recorded against
    that window and the remaining windows are still merged. Windows merged
    before a failure stay merged.

    Args:
        host: Windowing host to operate on
        window_id: Target window; resolved by ``target_policy`` when omitted
        target_policy: "current" (focused window) or "first" (first window
            enumerated by the host)

    Returns:
        ErrorReport for this invocation
    """
    op_trace_id = str(uuid4())
    token = trace_id_var.set(op_trace_id)
    report = ErrorReport(operation="merge_windows")

    logger.info(
        "Merge starting",
        operation="merge_windows",
        status="started",
        trace_id=op_trace_id,
        window_id=window_id,
        target_policy=target_policy
    )

    try:
        plan, snapshot = await plan_merge(host, window_id, target_policy)
        if plan is None:
            logger.info(
                "Nothing to merge",
                operation="merge_windows",
                status="noop",
                trace_id=op_trace_id,
                metrics={"windows": len(snapshot.windows)}
            )
            return report

        if snapshot.window(plan.target_window_id) is None:
            report.add_error(Error(
                error_type=ErrorType.INCONSISTENT_STATE,
                message=f"Target window {plan.target_window_id} not found",
                context={"window_id": plan.target_window_id, "phase": "plan"}
            ))
            return report

        for source in plan.sources:
            await merge_window(host, source, plan.target_window_id, report)

        logger.info(
            "Merge finished",
            operation="merge_windows",
            status="partial" if report.failed else "success",
            trace_id=op_trace_id,
            window_id=plan.target_window_id,
            merged=list(report.completed),
            failed=list(report.failed)
        )
    except Exception as e:
        report.add_error(Error(
            error_type=ErrorType.UNEXPECTED_ERROR,
            message="Unexpected error while merging windows",
            context={
                "window_id": window_id,
                "phase": "plan",
                "error": str(e),
                "exception_type": type(e).__name__
            },
            original_exception=e
        ))
    finally:
        report.log_summary(op_trace_id)
        trace_id_var.reset(token)

    return report
