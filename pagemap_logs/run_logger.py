"""
Run Logger - Markdown log of a single workflow run

One file per run with a table of contents, the run configuration, each
workflow step, the extracted records and a final summary.
"""

import json
import re
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional


class RunLogger:
    """
    Markdown run logger for step-by-step diagnostics.

    Usage:
        logger = RunLogger(
            instruction="give me all the actions possible on https://example.com ...",
            url="https://example.com",
            command_line="pagemap --url https://example.com",
        )
        logger.log_heading("Navigate")
        logger.log_step_result(0, "navigate", True, 812)
        logger.finalize(success=True, duration_ms=5120)
    """

    def __init__(
        self,
        instruction: str,
        url: Optional[str],
        command_line: Optional[str] = None,
        log_dir: str = "./logs",
        session_id: Optional[str] = None
    ):
        self.session_id = session_id or datetime.now().strftime('%Y%m%d-%H%M%S')
        self.dir = Path(log_dir)
        self.dir.mkdir(parents=True, exist_ok=True)
        self.path = self.dir / f'run-{self.session_id}.md'

        self._toc_placeholder = "<!-- TOC_PLACEHOLDER -->"
        self._toc: List[str] = []

        with open(self.path, 'w', encoding='utf-8') as f:
            f.write(f"# pagemap Run Log ({self.session_id})\n\n")
            f.write("## Navigation\n\n")
            f.write(self._toc_placeholder + "\n\n")
            if command_line:
                f.write(f"```bash\n{command_line}\n```\n\n")
            if url:
                f.write(f"- **URL**: {url}\n")
            if instruction:
                f.write(f"- **Instruction**:\n\n```text\n{instruction}\n```\n\n")

    def _write(self, text: str):
        with open(self.path, 'a', encoding='utf-8') as f:
            f.write(text)

    def log_heading(self, text: str):
        """Section heading with a TOC entry"""
        self._write("\n---\n\n")
        self._write(f"## {text}\n\n")
        self._toc.append(text)
        self._update_toc()

    def log_text(self, text: str):
        self._write(f"{text}\n\n")

    def log_kv(self, key: str, value: str):
        self._write(f"- {key}: {value}\n")

    def log_code(self, lang: str, code: str):
        self._write(f"```{lang}\n{code}\n```\n\n")

    def log_step_result(
        self,
        step_index: int,
        step_type: str,
        success: bool,
        duration_ms: int,
        details: Optional[str] = None
    ):
        status = "✅" if success else "❌"
        self._write(f"**Step {step_index + 1}:** {status} {step_type} ({duration_ms}ms)\n")
        if details:
            self._write(f"  - {details}\n")
        self._write("\n")

    def log_json(self, data: Any, title: str = "Data"):
        self._write(f"### {title}\n\n")
        self._write(f"```json\n{json.dumps(data, indent=2, ensure_ascii=False)}\n```\n\n")

    def log_success(self, message: str):
        self._write(f"✅ **SUCCESS:** {message}\n\n")

    def log_error(self, message: str):
        self._write(f"❌ **ERROR:** {message}\n\n")

    def log_warning(self, message: str):
        self._write(f"⚠️ **WARNING:** {message}\n\n")

    def finalize(self, success: bool, duration_ms: int = 0, error: Optional[str] = None):
        """Closing summary: status, duration and error if any"""
        self._write("\n---\n\n")
        self._write("## Summary\n\n")

        status = "✅ SUCCESS" if success else "❌ FAILED"
        self._write(f"**Status:** {status}\n")
        self._write(f"**Duration:** {duration_ms}ms\n")

        if error:
            self._write(f"\n**Error:** {error}\n")

        self._write("\n")

    # --- Helpers ---
    @staticmethod
    def _slugify(text: str) -> str:
        s = text.strip().lower()
        s = re.sub(r"[^a-z0-9\s-]", "", s)
        s = re.sub(r"\s+", "-", s)
        return s

    def _update_toc(self):
        content = self.path.read_text(encoding='utf-8')
        title = self._toc[-1]
        toc_md = f"- [{title}](#{self._slugify(title)})\n{self._toc_placeholder}"
        self.path.write_text(content.replace(self._toc_placeholder, toc_md, 1), encoding='utf-8')

    @property
    def log_path(self) -> str:
        return str(self.path)


def create_run_logger(
    instruction: str,
    url: Optional[str],
    command_line: Optional[str] = None,
    log_dir: str = "./logs",
) -> RunLogger:
    return RunLogger(instruction=instruction, url=url, command_line=command_line, log_dir=log_dir)
