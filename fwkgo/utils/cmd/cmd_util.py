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

import shlex
import subprocess
import time
from dataclasses import dataclass, field
from threading import Timer
from typing import Optional, Tuple

# timeout is 3 hours
DEFAULT_TIMEOUT_SECOND = 3 * 3600


@dataclass(frozen=True)
class Command:
    """A program and its argument list. Never passed through a shell."""

    program: str
    args: Tuple[str, ...] = field(default_factory=tuple)
    cwd: Optional[str] = None

    @property
    def argv(self):
        return [self.program, *self.args]

    def __str__(self):
        return shlex.join(self.argv)


def decode_bytes(input: bytes) -> str:
    try:
        return bytes.decode(input, "UTF-8")
    except UnicodeDecodeError:
        return bytes.decode(input, "GBK")


def exec_command(command: Command, timeout_second=DEFAULT_TIMEOUT_SECOND):
    """
    Run a command synchronously with stdout and stderr combined.

    Returns:
        tuple: (exit_code, output). A missing executable yields exit code 127
        and the OS error text as output.
    """
    start_mills = int(time.time() * 1000)
    try:
        compile_popen = subprocess.Popen(
            command.argv,
            cwd=command.cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
        )
    except OSError as e:
        return 127, f"{command.program}: {e.strerror or e}"
    timer = Timer(timeout_second, lambda process: process.kill(), [compile_popen])
    try:
        timer.start()
        stdout, _ = compile_popen.communicate()
    finally:
        timer.cancel()
    err_code = compile_popen.returncode
    err_msg = decode_bytes(stdout or b"")
    if err_code == -9 and not err_msg:
        use_time = int(time.time() * 1000) - start_mills
        err_msg = f"Failed for timeout({err_code}), use_time: {use_time}ms"
    return err_code, err_msg


class CommandRunner:
    """Blocking ``run(command) -> (exit_code, output)`` capability."""

    def run(self, command: Command):
        raise NotImplementedError


class SubprocessRunner(CommandRunner):
    def __init__(self, timeout_second=DEFAULT_TIMEOUT_SECOND):
        self.timeout_second = timeout_second

    def run(self, command: Command):
        return exec_command(command, self.timeout_second)
