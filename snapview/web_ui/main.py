"""NiceGUI entrypoint for the snapview snapshot browser."""

from __future__ import annotations

import argparse
import json
import logging
import os
from typing import Any, Callable, Optional

from nicegui import run, ui

from snapview.domain.ports import UseCaseError
from snapview.domain.selection import FetchIntent, FetchKind
from snapview.domain.snapshot_filename import EXPECTED_PATTERN
from snapview.utils.logging import configure_root
from snapview.web_ui.runtime import BrowserRuntime
from snapview.web_ui.viewmodels import WebSettingsVM, parse_settings_json

LOGGER = logging.getLogger(__name__)


def _install_theme() -> None:
    """Install global CSS tokens for the web runtime."""
    ui.add_head_html(
        """
<link rel="preconnect" href="https://fonts.googleapis.com">
<link rel="preconnect" href="https://fonts.gstatic.com" crossorigin>
<link href="https://fonts.googleapis.com/css2?family=Space+Grotesk:wght@400;500;700&family=IBM+Plex+Mono:wght@400;500&display=swap" rel="stylesheet">
<style>
:root {
  --snapview-bg: #14171c;
  --snapview-card: #1d2128;
  --snapview-border: #2f3540;
  --snapview-accent: #4dabf7;
  --snapview-muted: #9aa4b2;
}
body {
  font-family: 'Space Grotesk', sans-serif;
  background: var(--snapview-bg);
  color: #e9ecef;
}
.snapview-page {
  max-width: 1480px;
  margin: 0 auto;
  padding: 14px;
}
.snapview-card {
  background: var(--snapview-card);
  border: 1px solid var(--snapview-border);
  border-radius: 12px;
}
.snapview-mono { font-family: 'IBM Plex Mono', monospace; }
.snapview-diff {
  font-family: 'IBM Plex Mono', monospace;
  font-size: 12px;
  white-space: pre-wrap;
  color: #ced4da;
  margin: 0;
}
.snapview-run { display: inline; white-space: pre-wrap; }
</style>
        """
    )


def _notify_error(exc: Exception) -> None:
    """Render exceptions as concise NiceGUI toasts."""
    message = getattr(exc, "message", None) or str(exc)
    ui.notify(message, color="negative", close_button="OK")


def _build_ui(runtime: BrowserRuntime) -> None:
    """Register the NiceGUI pages for the runtime."""

    @ui.page("/")
    async def index() -> None:
        settings_vm = WebSettingsVM.from_settings_vm(runtime.settings_vm)
        vm = runtime.browser_vm

        @ui.refreshable
        def render_status() -> None:
            with ui.row().classes("w-full justify-between items-center snapview-card p-3 q-mb-sm"):
                ui.label("Snapshot Browser").classes("text-h5")
                mode = "demo" if runtime.demo else runtime.settings_vm.api_base_url
                ui.label(mode).classes("snapview-mono text-caption")
                ui.label(runtime.status_message).classes("snapview-mono text-caption")

        @ui.refreshable
        def render_hosts() -> None:
            selected = vm.state.host
            with ui.column().classes("w-full q-gutter-xs"):
                if not vm.hosts:
                    ui.label("No hosts available.").classes("text-caption")
                for host in vm.hosts:
                    ui.button(
                        host,
                        color="primary" if host == selected else "grey-8",
                        on_click=lambda _, h=host: select_host(h),
                    ).props("dense no-caps").classes("w-full snapview-mono")

        @ui.refreshable
        def render_timestamps() -> None:
            state = vm.state
            with ui.column().classes("w-full q-gutter-xs"):
                if not state.host:
                    ui.label("Select a host to list its snapshots.").classes("text-caption")
                elif state.awaiting(FetchKind.TIMESTAMPS):
                    ui.spinner(size="lg")
                elif not state.timestamps:
                    ui.label("No snapshots for this host.").classes("text-caption")
                for row in vm.timestamp_rows():
                    ui.button(
                        row.label,
                        color="primary" if row.selected else "grey-8",
                        on_click=lambda _, t=row.timestamp: select_timestamp(t),
                    ).props("dense no-caps").classes("w-full snapview-mono")

        @ui.refreshable
        def render_content() -> None:
            placeholder = vm.content_placeholder()
            if placeholder:
                ui.label(placeholder).classes("text-caption")
                return
            ui.code(vm.content_text(), language="json").classes("w-full")

        @ui.refreshable
        def render_compare() -> None:
            state = vm.state
            with ui.row().classes("w-full items-center q-gutter-sm"):
                ui.button(
                    "Hide Diff" if state.comparison_mode else "Compare",
                    on_click=toggle_compare,
                ).props("outline" + ("" if state.timestamp_a else " disable"))
                if state.comparison_mode:
                    options = dict(vm.compare_options())
                    ui.select(
                        options,
                        value=state.timestamp_b if state.timestamp_b in options else None,
                        label="Compare with",
                        on_change=lambda e: select_compare(e.value),
                    ).props("dense outlined").classes("w-72 snapview-mono")
            if not state.comparison_mode:
                return
            status = vm.diff_status_label()
            if status:
                ui.label(status).classes("text-subtitle2")
            placeholder = vm.diff_placeholder()
            if placeholder:
                ui.label(placeholder).classes("text-caption")
                if vm.diff_failed():
                    ui.button("Retry", on_click=lambda: select_compare(state.timestamp_b)).props("flat dense")
                return
            with ui.element("pre").classes("snapview-diff w-full"):
                for styled in vm.diff_runs():
                    ui.label(styled.text).classes("snapview-run").style(styled.css())

        @ui.refreshable
        def render_upload_result() -> None:
            if vm.upload_message:
                ui.label(vm.upload_message).classes(
                    "text-positive" if vm.upload_ok else "text-negative"
                )

        def refresh_browser_views() -> None:
            render_status.refresh()
            render_hosts.refresh()
            render_timestamps.refresh()
            render_content.refresh()
            render_compare.refresh()
            render_upload_result.refresh()

        async def _resolve(intent: Optional[FetchIntent]) -> None:
            refresh_browser_views()
            if intent is None:
                return
            try:
                payload = await run.io_bound(runtime.gateway_call(intent))
            except Exception as exc:
                if runtime.fail(intent, exc):
                    ui.notify(runtime.status_message, color="negative", close_button="OK")
            else:
                runtime.complete(intent, payload)
            refresh_browser_views()

        async def _invoke(bind: Callable[[], Callable[[], Any]], apply: Callable[[Any], None]) -> Any:
            try:
                result = await run.io_bound(bind())
            except Exception as exc:
                _notify_error(exc)
                result = None
            else:
                apply(result)
            refresh_browser_views()
            return result

        async def load_hosts() -> None:
            await _invoke(runtime.hosts_call, runtime.apply_hosts)

        async def select_host(host: str) -> None:
            await _resolve(vm.select_host(host))

        async def select_timestamp(timestamp: str) -> None:
            await _resolve(vm.select_timestamp(timestamp))

        def toggle_compare() -> None:
            vm.toggle_compare_mode()
            refresh_browser_views()

        async def select_compare(timestamp: Any) -> None:
            if not timestamp:
                return
            await _resolve(vm.select_compare_timestamp(str(timestamp)))

        async def on_upload(event) -> None:
            name = str(getattr(event, "name", "") or "")
            data = event.content.read()
            try:
                parsed = await run.io_bound(runtime.upload_call(name, data))
            except UseCaseError as err:
                runtime.upload_failed(err)
                ui.notify(vm.upload_message, color="negative")
                refresh_browser_views()
                return
            hosts = None
            try:
                hosts = await run.io_bound(runtime.hosts_call())
            except UseCaseError as err:
                LOGGER.warning("Host refresh after upload failed: %s", err.message)
            runtime.upload_done(parsed, hosts)
            ui.notify(vm.upload_message, color="positive")
            refresh_browser_views()

        def download_diff() -> None:
            state = vm.state
            if state.diff is None or not state.diff.has_text:
                ui.notify("No differences to export.", color="warning")
                return
            html = f"<pre class=\"snapview-diff\">{vm.diff_html()}</pre>"
            ui.download(
                html.encode("utf-8"),
                filename=f"diff_{state.host}_{state.timestamp_a}_{state.timestamp_b}.html".replace(":", "-"),
            )

        async def apply_settings(save: bool) -> None:
            try:
                runtime.apply_settings_payload(settings_vm.to_payload())
                if save:
                    runtime.save_settings()
                    ui.notify("Settings saved.", color="positive")
            except Exception as exc:
                _notify_error(exc)
            refresh_browser_views()

        async def run_test_connection() -> None:
            await apply_settings(save=False)
            result = await _invoke(runtime.connection_call, runtime.connection_checked)
            if result and result.get("ok"):
                ui.notify(f"Connection OK: {result.get('message')}", color="positive")

        def export_settings_json() -> None:
            payload = settings_vm.to_payload()
            payload.pop("api_key", None)
            ui.download(
                json.dumps(payload, ensure_ascii=False, indent=2).encode("utf-8"),
                filename="snapview_settings.json",
            )

        def on_import_settings(event) -> None:
            nonlocal settings_vm
            try:
                payload = parse_settings_json(event.content.read().decode("utf-8-sig"))
                runtime.apply_settings_payload(payload)
                settings_vm = WebSettingsVM.from_settings_vm(runtime.settings_vm)
                ui.notify("Imported settings JSON.", color="positive")
            except Exception as exc:
                _notify_error(exc)
            render_settings.refresh()
            refresh_browser_views()

        @ui.refreshable
        def render_settings() -> None:
            with ui.card().classes("snapview-card q-pa-sm w-full"):
                ui.label("Snapshot service")
                ui.input(
                    "API base URL",
                    value=settings_vm.api_base_url,
                    on_change=lambda e: setattr(settings_vm, "api_base_url", str(e.value or "").strip()),
                ).props("dense outlined").classes("w-96")
                ui.input(
                    "API key",
                    value=settings_vm.api_key,
                    password=True,
                    on_change=lambda e: setattr(settings_vm, "api_key", str(e.value or "")),
                ).props("dense outlined").classes("w-72")
                with ui.row().classes("q-gutter-sm"):
                    ui.number("Request timeout (s)", value=settings_vm.request_timeout_s, on_change=lambda e: setattr(settings_vm, "request_timeout_s", int(e.value or 10))).props("dense outlined")
                    ui.number("Retries", value=settings_vm.retries, on_change=lambda e: setattr(settings_vm, "retries", int(e.value or 0))).props("dense outlined")
                ui.checkbox("Enable debug logging", value=settings_vm.debug_logging, on_change=lambda e: setattr(settings_vm, "debug_logging", bool(e.value)))
                with ui.row().classes("q-gutter-sm"):
                    ui.button("Apply", on_click=lambda: apply_settings(save=False), color="primary")
                    ui.button("Save", on_click=lambda: apply_settings(save=True))
                    ui.button("Test Connection", on_click=run_test_connection)
                    ui.button("Export JSON", on_click=export_settings_json)
                    ui.upload(on_upload=on_import_settings, auto_upload=True, label="Import JSON")

        with ui.column().classes("snapview-page w-full"):
            render_status()
            with ui.tabs().classes("w-full") as tabs:
                tab_browse = ui.tab("Browse")
                tab_upload = ui.tab("Upload")
                tab_settings = ui.tab("Settings")
            with ui.tab_panels(tabs, value=tab_browse).classes("w-full"):
                with ui.tab_panel(tab_browse):
                    with ui.row().classes("w-full no-wrap q-gutter-sm items-start"):
                        with ui.card().classes("snapview-card q-pa-sm w-56"):
                            with ui.row().classes("w-full items-center justify-between"):
                                ui.label("Hosts").classes("text-subtitle1")
                                ui.button(icon="refresh", on_click=load_hosts).props("flat dense")
                            render_hosts()
                        with ui.card().classes("snapview-card q-pa-sm w-64"):
                            ui.label("Snapshots").classes("text-subtitle1")
                            render_timestamps()
                        with ui.card().classes("snapview-card q-pa-sm col"):
                            ui.label("Content").classes("text-subtitle1")
                            render_content()
                            ui.separator()
                            render_compare()
                            ui.button("Download Diff", on_click=download_diff).props("flat dense")
                with ui.tab_panel(tab_upload):
                    with ui.column().classes("w-full q-gutter-sm"):
                        ui.label(f"Expected filename: {EXPECTED_PATTERN}").classes("snapview-mono text-caption")
                        ui.upload(
                            on_upload=on_upload,
                            auto_upload=True,
                            label="Upload snapshot (.json)",
                            max_file_size=runtime.settings_vm.max_upload_bytes or None,
                        ).props("accept=.json")
                        render_upload_result()
                with ui.tab_panel(tab_settings):
                    render_settings()

            await load_hosts()


def _parse_args() -> argparse.Namespace:
    """Parse CLI args for web runtime startup."""
    parser = argparse.ArgumentParser(description="Run the snapview NiceGUI snapshot browser.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8081)
    parser.add_argument("--api-url", default=None, help="Snapshot service base URL.")
    parser.add_argument("--demo", action="store_true", help="Serve built-in sample snapshots.")
    parser.add_argument("--reload", action="store_true")
    parser.add_argument("--smoke-test", action="store_true")
    return parser.parse_args()


def main() -> None:
    """CLI entrypoint for the NiceGUI runtime."""
    args = _parse_args()
    configure_root()
    runtime = BrowserRuntime(demo=args.demo)
    if args.api_url:
        runtime.apply_settings_payload({"api_base_url": args.api_url})
    if args.smoke_test:
        payload = runtime.settings_payload()
        print("web-smoke-ok", payload.get("api_base_url"), "demo" if args.demo else "live")
        return
    LOGGER.info("Starting snapshot browser on %s:%s", args.host, args.port)
    _install_theme()
    _build_ui(runtime)
    ui.run(
        host=args.host,
        port=args.port,
        title="Snapshot Browser",
        reload=args.reload,
        show=False,
        storage_secret=os.environ.get("SNAPVIEW_WEB_STORAGE_SECRET", "snapview-web-ui-secret"),
    )


if __name__ == "__main__":
    main()
