#
# Copyright 2024 fwkgo Project Authors. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found at
#
# https://opensource.org/license/MIT
#
# The above copyright notice and this permission
# notice shall be included in all copies or
# substantial portions of the Software.

"""
Progress reporting for the build pipeline.

Every component receives a Reporter instead of printing directly. Each call
is kept as a ReportEvent and rendered to the output stream in the usual
console style:

    ==================Building static framework Widgets========================
      Copying public headers ['Widgets.h']
      ⚠️  License file LICENSE not found
    use time: 12 s
"""

import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class Severity(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class ReportEvent:
    kind: str  # section_start, section_end or message
    severity: Severity
    text: str


class Reporter:
    def __init__(self, stream=None, verbose=True):
        self.stream = stream
        self.verbose = verbose
        self.events: List[ReportEvent] = []
        self._sections: List[tuple] = []

    def _print(self, text):
        print(text, file=self.stream or sys.stdout)

    def _record(self, kind, severity, text):
        event = ReportEvent(kind, severity, text)
        self.events.append(event)
        return event

    @contextmanager
    def section(self, title):
        self._record("section_start", Severity.INFO, title)
        self._print(f"=================={title}========================")
        self._sections.append((title, time.time()))
        try:
            yield self
        finally:
            title, before_time = self._sections.pop()
            self._record("section_end", Severity.INFO, title)
            self._print(f"use time: {int(time.time() - before_time)} s")

    def message(self, text):
        self._record("message", Severity.INFO, text)
        if self.verbose:
            self._print(f"  {text}")

    def warning(self, text):
        self._record("message", Severity.WARNING, text)
        self._print(f"  ⚠️  {text}")

    def error(self, text):
        self._record("message", Severity.ERROR, text)
        self._print(f"ERROR: {text}")

    def messages(self, severity: Optional[Severity] = None) -> List[str]:
        return [
            e.text
            for e in self.events
            if e.kind == "message" and (severity is None or e.severity == severity)
        ]
