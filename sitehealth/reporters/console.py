import sys
from colorama import init as colorama_init, Fore, Style
from datetime import datetime
colorama_init(autoreset=True)


class Log:
    """Timestamped, colored log lines on stderr so stdout stays machine-readable."""

    def __init__(self, verbose: int = 1, stream=None):
        self.verbose = verbose
        self.stream = stream or sys.stderr

    def _time(self):
        return datetime.now().strftime("[%H:%M:%S]")

    def _fmt(self, level: str, color: str):
        return f"{self._time()} {color}[{level}]{Style.RESET_ALL}"

    def _emit(self, line: str):
        print(line, file=self.stream)

    def info(self, msg: str):
        if self.verbose >= 1:
            self._emit(f"{self._fmt('INFO', Fore.CYAN)} {msg}")

    def warn(self, msg: str):
        if self.verbose >= 0:
            self._emit(f"{self._fmt('WARNING', Fore.YELLOW)} {msg}")

    def ok(self, msg: str):
        if self.verbose >= 1:
            self._emit(f"{self._fmt('SUCCESS', Fore.GREEN)} {msg}")

    def fail(self, msg: str):
        self._emit(f"{self._fmt('FAIL', Fore.RED)} {msg}")

    def debug(self, msg: str):
        if self.verbose >= 2:
            self._emit(f"{self._fmt('DEBUG', Fore.MAGENTA)} {msg}")

    def verdict(self, v):
        col = {"PASS": Fore.GREEN, "FAIL": Fore.RED}.get(v.status.name, Fore.WHITE)
        weight = f" {Style.DIM}(weight {v.weight}){Style.RESET_ALL}" if v.weight else ""
        self._emit(f"{self._fmt(v.status.name, col)} {v.group} / {v.title}{weight}")

    def report(self, report):
        if self.verbose < 1:
            return
        for v in report.verdicts:
            self.verdict(v)
        summary = f"{len(report.passed)} passed, {len(report.failed)} failed"
        if report.indeterminate:
            summary += f", {len(report.indeterminate)} informational"
        if report.score is not None:
            summary += f", score {report.score}/100"
        self.info(summary)
