# -*- coding: utf-8 -*-
"""
Meterline – A throttled, in-place terminal progress meter for Python.
Copyright (c) 2025 Igor Iatsenko
Licensed under the MIT License.
"""

import os
import sys
import shutil
import time
import threading
from contextlib import contextmanager
from enum import Enum
from typing import (
        Optional,
        Tuple,
        Sequence,
        Union,
        TextIO,
)
import logging

__all__ = [
    'Bar',
    'SharedBar',
    'Coordinator',
    'Animation',
    'Output',
    'Colors',
    'monitor',
    'format_interval',
    'format_sizeof',
    'format_time',
    'divmod_floor',
    'DEFAULT_COLOUR',
]

logger = logging.getLogger('meterline')


DEFAULT_COLOUR = 'default'
_FALLBACK_NCOLS = 10
_SI_PREFIXES = ('', 'k', 'M', 'G', 'T', 'P', 'E', 'Z')


def _now() -> float:
    """Monotonic clock used for every elapsed-time measurement"""
    return time.monotonic()


# ============================================================================
# Formatting
# ============================================================================

def divmod_floor(x: int, y: int) -> Tuple[int, int]:
    """Floor division and modulus of two integers"""
    return x // y, x % y


def format_interval(seconds: float, human: bool = False) -> str:
    """Format a number of seconds as a clock time, [HH:]MM:SS, or SSs when human"""
    seconds = int(seconds)
    if human and seconds < 60:
        return f'{seconds}s'

    minutes, seconds = divmod_floor(seconds, 60)
    hours, minutes = divmod_floor(minutes, 60)

    if hours == 0:
        return '{:02d}:{:02d}'.format(minutes, seconds)
    return '{:02d}:{:02d}:{:02d}'.format(hours, minutes, seconds)


def format_sizeof(num: float, divisor: float = 1000) -> str:
    """
    Format a number with SI order of magnitude prefixes.

    Values below 999.5 are printed as-is with up to two decimals; larger
    values are scaled down by `divisor` until they fit, gaining a k, M, G...
    suffix on the way.
    """
    value = float(num)

    for prefix in _SI_PREFIXES:
        if abs(value) < 999.5:
            if abs(value) < 99.95:
                if abs(value) < 9.995:
                    return f'{value:1.2f}{prefix}'
                return f'{value:2.1f}{prefix}'
            return f'{value:3.0f}{prefix}'
        value /= divisor

    return f'{value:3.1f}Y'


def format_time(seconds: float) -> str:
    """Format a duration with the largest fitting unit (s, min, hr, days)"""
    value = float(seconds)
    for divisor, unit in ((60.0, 's'), (60.0, 'min'), (24.0, 'hr')):
        if abs(value) < divisor - 0.005:
            return f'{value:1.2f}{unit}'
        value /= divisor
    return f'{value:1.2f}days'


# ============================================================================
# Terminal utilities
# ============================================================================

def _get_terminal_columns() -> int:
    """Return the width of the terminal in columns, or 0 without a terminal."""
    # Honours COLUMNS, then falls back to stdout
    columns = shutil.get_terminal_size(fallback=(0, 0)).columns
    if columns > 0:
        return columns

    # stdout may be redirected while stderr still points at the terminal
    for stream in (sys.__stderr__, sys.__stdout__):
        try:
            return os.get_terminal_size(stream.fileno()).columns
        except (AttributeError, OSError, ValueError):
            continue
    return 0


def _cursor_up(lines: int) -> str:
    return f'\033[{lines}A'


class Colors:
    """ANSI color codes and utilities"""
    # Reset
    RESET = '\033[0m'

    # Basic colors (3/4 bit)
    BLACK = '\033[30m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    BLUE = '\033[34m'
    MAGENTA = '\033[35m'
    CYAN = '\033[36m'
    WHITE = '\033[37m'

    # Bright colors
    BRIGHT_BLACK = '\033[90m'
    BRIGHT_RED = '\033[91m'
    BRIGHT_GREEN = '\033[92m'
    BRIGHT_YELLOW = '\033[93m'
    BRIGHT_BLUE = '\033[94m'
    BRIGHT_MAGENTA = '\033[95m'
    BRIGHT_CYAN = '\033[96m'
    BRIGHT_WHITE = '\033[97m'

    @staticmethod
    def rgb(r: int, g: int, b: int) -> str:
        """Create 24-bit RGB color"""
        return f'\033[38;2;{r};{g};{b}m'

    @classmethod
    def resolve(cls, colour: str) -> str:
        """
        Turn a colour name, a #rrggbb hex string or an escape sequence into an
        escape sequence. DEFAULT_COLOUR stays as the "no colour" sentinel, and
        already resolved sequences pass through unchanged.
        """
        if colour == DEFAULT_COLOUR or colour.startswith('\033['):
            return colour

        if colour.startswith('#'):
            hex_value = colour[1:]
            if len(hex_value) != 6:
                raise ValueError(f"Invalid hex colour '{colour}'")
            try:
                r, g, b = (int(hex_value[i:i + 2], 16) for i in (0, 2, 4))
            except ValueError:
                raise ValueError(f"Invalid hex colour '{colour}'") from None
            return cls.rgb(r, g, b)

        name = colour.strip().upper().replace(' ', '_').replace('-', '_')
        code = getattr(cls, name, None) if name != 'RESET' else None
        if not isinstance(code, str):
            raise ValueError(f"Unknown colour '{colour}'")
        return code


# ============================================================================
# Glyph presets
# ============================================================================

class Animation(Enum):
    """Meter rendering families"""
    TQDM = 'tqdm'
    TQDM_ASCII = 'tqdm_ascii'
    FILLUP = 'fillup'
    CLASSIC = 'classic'
    ARROW = 'arrow'
    FIRACODE = 'firacode'

    @property
    def is_block_style(self) -> bool:
        """Whether the family renders partial cells from a multi-level charset"""
        return self in (Animation.TQDM, Animation.TQDM_ASCII, Animation.FILLUP)


class Output(Enum):
    """Standard stream a bar renders to"""
    STDERR = 'stderr'
    STDOUT = 'stdout'


# First glyph is the empty cell, last one the full cell
TQDM_CHARSET = (' ', '▏', '▎', '▍', '▌', '▋', '▊', '▉', '█')
TQDM_ASCII_CHARSET = (' ', '1', '2', '3', '4', '5', '6', '7', '8', '9', '#')
FILLUP_CHARSET = (' ', '▁', '▂', '▃', '▄', '▅', '▆', '▇', '█')

CLASSIC_SPINNER = ('\\', '|', '/', '-')
FIRACODE_SPINNER = ('\uee06', '\uee07', '\uee08', '\uee09', '\uee0a', '\uee0b')

# Fira Code progress ligatures
_FIRACODE_START = '\uee03'
_FIRACODE_END = '\uee02'
_FIRACODE_END_DONE = '\uee05'
_FIRACODE_FILLED = '\uee04'
_FIRACODE_EMPTY = '\uee01'


# ============================================================================
# Output Coordinator
# ============================================================================

class Coordinator:
    """
    Serializes frame writes from every bar and thread onto the output streams.

    Coordinator.instance() is the process-wide coordinator shared by bars that
    are not given one explicitly. Separate instances can be created with their
    own stream and lock, e.g. to capture output in tests.
    """
    _instance: Optional['Coordinator'] = None
    _instance_lock = threading.Lock()

    def __init__(self, stream: Optional[TextIO] = None, lock: Optional[threading.Lock] = None):
        """
        Create an output coordinator.

        Args:
            stream: Stream receiving all output instead of each bar's own stream
            lock: Lock serializing the writes (a new one if not given)
        """
        self.stream = stream
        self._lock = lock if lock is not None else threading.Lock()

    @classmethod
    def instance(cls) -> 'Coordinator':
        """Get the process-wide coordinator, creating it on first use"""
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @contextmanager
    def lock(self):
        """Context manager holding the output lock"""
        with self._lock:
            yield self._lock

    def _resolve(self, stream: TextIO) -> TextIO:
        return self.stream if self.stream is not None else stream

    def write_at(self, stream: TextIO, text: str, position: int = 0):
        """
        Write one frame on the row reserved for `position`.

        Row 0 is overwritten in place. Lower rows are reached with newlines and
        the cursor is moved back up afterwards, so every frame leaves the cursor
        on the line it started from.
        """
        if position == 0:
            output = '\r' + text
        else:
            output = '\n' * position + text + _cursor_up(position)

        stream = self._resolve(stream)
        with self.lock():
            try:
                stream.write(output)
                stream.flush()
            except (OSError, ValueError):
                logger.debug('Dropped progress frame', exc_info=True)

    def clear(self, stream: TextIO, width: int, position: int = 0):
        """Blank `width` columns of the row reserved for `position`"""
        self.write_at(stream, ' ' * width + '\r', position)

    def write_line(self, stream: TextIO, text: str):
        """Write text verbatim, propagating any I/O error"""
        stream = self._resolve(stream)
        with self.lock():
            stream.write(text)
            stream.flush()


# ============================================================================
# Progress Bar
# ============================================================================

class Bar:
    """Progress indicator rendering itself in place on a terminal row"""

    def __init__(self,
                 total: int = 0,
                 desc: str = '',
                 leave: bool = True,
                 file: Optional[TextIO] = None,
                 output: Output = Output.STDERR,
                 ncols: Optional[int] = None,
                 mininterval: float = 0.1,
                 miniters: int = 1,
                 dynamic_miniters: bool = False,
                 ascii: bool = False,
                 disable: bool = False,
                 unit: str = 'it',
                 unit_scale: bool = False,
                 unit_divisor: int = 1000,
                 dynamic_ncols: bool = False,
                 initial: int = 0,
                 position: int = 0,
                 postfix: str = '',
                 colour: str = DEFAULT_COLOUR,
                 delay: float = 0.0,
                 fill: str = ' ',
                 animation: Animation = Animation.TQDM,
                 max_fps: bool = False,
                 coordinator: Optional[Coordinator] = None):
        """
        Create a progress bar.

        Args:
            total: Expected number of iterations (0 for indefinite mode)
            desc: Description shown before the bar
            leave: Keep the last frame when complete instead of erasing it
            file: Writable sink receiving one plain line per frame
            output: Standard stream to render to when no file is given
            ncols: Meter width (None fits the terminal, 0 hides the meter)
            mininterval: Minimum seconds between redraws
            miniters: Minimum iterations between redraws
            dynamic_miniters: Raise miniters automatically while redraws lag
            ascii: Use ASCII digits instead of unicode blocks for the meter
            disable: Count iterations without rendering anything
            unit: Iteration unit label
            unit_scale: Scale counts and rate with SI prefixes
            unit_divisor: Divisor used by unit_scale
            dynamic_ncols: Re-read the terminal width on every redraw
            initial: Initial counter value, also restored by reset()
            position: Terminal row offset of this bar (for stacked bars)
            postfix: Extra stats appended after the rate
            colour: Meter colour name or #rrggbb ('default' for none)
            delay: Seconds to wait after start before the first redraw
            fill: Glyph for the unfilled part of the meter
            animation: Meter family
            max_fps: Redraw on every update call
            coordinator: Output coordinator (the process-wide one by default)
        """
        # Validation
        if total < 0:
            raise ValueError("total must be non-negative")
        if ncols is not None and ncols < 0:
            raise ValueError("ncols must be non-negative")
        if mininterval < 0:
            raise ValueError("mininterval must be non-negative")
        if miniters < 0:
            raise ValueError("miniters must be non-negative")
        if unit_divisor <= 0:
            raise ValueError("unit_divisor must be positive")
        if initial < 0:
            raise ValueError("initial must be non-negative")
        if position < 0:
            raise ValueError("position must be non-negative")
        if delay < 0:
            raise ValueError("delay must be non-negative")

        self.total = total
        self.desc = desc
        self.leave = leave
        self.file = file
        self.output = output
        self.mininterval = mininterval
        self.miniters = miniters
        self.dynamic_miniters = dynamic_miniters
        self.ascii = ascii
        self.disable = disable
        self.unit = unit
        self.unit_scale = unit_scale
        self.unit_divisor = unit_divisor
        self.dynamic_ncols = dynamic_ncols
        self.initial = initial
        self.position = position
        self.postfix = postfix
        self.colour = Colors.resolve(colour)
        self.delay = delay
        self.fill = fill
        self.animation = animation
        self.max_fps = max_fps
        self.coordinator = coordinator

        self.n = initial
        self.ncols = ncols if ncols is not None else _FALLBACK_NCOLS
        self.started = False
        self.elapsed_time = 0.0
        self.its_per = 0.0
        self.bar_length = 0

        self._user_ncols = ncols
        self._start_time = 0.0
        self._force_refresh = False
        self._closed = False
        self._custom_charset: Optional[Tuple[str, ...]] = None
        self._spinner_idx = 0
        self._resolve_charset()

    def __enter__(self):
        """Enter context manager"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager"""
        self.close()
        return False

    @property
    def progress(self) -> float:
        """Completion fraction in [0, 1] (0 in indefinite mode)"""
        return self._fraction(self.n)

    def completed(self) -> bool:
        """Check if the counter has reached the total"""
        return self.total > 0 and self.n >= self.total

    def _get_coordinator(self) -> Coordinator:
        return self.coordinator if self.coordinator is not None else Coordinator.instance()

    def _stream(self) -> TextIO:
        return sys.stdout if self.output == Output.STDOUT else sys.stderr

    # ------------------------------------------------------------------------
    # Throttling
    # ------------------------------------------------------------------------

    def _start(self):
        """Start the clock and resolve display settings for a new run"""
        self._start_time = _now()
        self.elapsed_time = 0.0
        self.its_per = 0.0
        self._spinner_idx = 0

        if self._user_ncols is not None:
            self.ncols = self._user_ncols

        self.set_colour(self.colour)
        self._resolve_charset()
        # Keep a redraw already requested by refresh()
        self._force_refresh = self._force_refresh or self.max_fps
        self._closed = False
        self.started = True

        logger.debug('Bar %r started (total=%d, position=%d)', self.desc, self.total, self.position)

    def update(self, n: int = 1):
        """Advance the counter by n and redraw if the throttle allows it"""
        if n < 0:
            raise ValueError("n must be non-negative")

        if not self.started:
            self._start()

        self.n += n

        if self.disable:
            return

        now = _now() - self._start_time
        interval_passed = self.mininterval <= now - self.elapsed_time

        if self.dynamic_miniters and not interval_passed:
            self.miniters += n

        iterations_passed = self.miniters <= 1 or self.n % self.miniters == 0

        if ((interval_passed and iterations_passed and self.delay <= now)
                or self.completed()
                or self._force_refresh):
            if self.dynamic_miniters:
                self.miniters = 0
            self._display()

    def refresh(self):
        """Force a redraw of the bar"""
        self._force_refresh = True
        try:
            self.update(0)
        finally:
            self._force_refresh = self.max_fps

    def reset(self, total: Optional[int] = None):
        """Reset the counter to its initial value; the clock restarts on the next update"""
        if total is not None:
            if total < 0:
                raise ValueError("total must be non-negative")
            self.total = total

        self.n = self.initial
        self.started = False

    def set_position(self, position: int):
        """Set the counter to an absolute value and redraw if allowed"""
        if position < 0:
            raise ValueError("position must be non-negative")
        self.n = position
        self.update(0)

    # ------------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------------

    def _fraction(self, i: int) -> float:
        if self.total <= 0:
            return 0.0
        return max(0.0, min(1.0, i / self.total))

    def _format_count(self, value: float) -> str:
        if self.unit_scale:
            return format_sizeof(value, self.unit_divisor)
        return str(value)

    def _format_rate(self) -> str:
        if self.its_per <= 0:
            return '?'
        if self.unit_scale:
            return format_sizeof(self.its_per, self.unit_divisor)
        return f'{self.its_per:.2f}'

    def _format_postfix(self) -> str:
        return f', {self.postfix}' if self.postfix else ''

    def _measure(self, i: int):
        self.elapsed_time = _now() - self._start_time
        self.its_per = i / self.elapsed_time if self.elapsed_time > 0 else 0.0

    def _render_left(self, i: int) -> Tuple[float, str]:
        progress = self._fraction(i)
        desc_sep = ': ' if self.desc else ''
        percentage = int(progress * 100)

        if progress >= 1.0:
            padding = ''
        elif percentage >= 10:
            padding = ' '
        else:
            padding = '  '

        return progress, f'{self.desc}{desc_sep}{padding}{percentage}%'

    def _render_right(self, i: int) -> str:
        self._measure(i)

        elapsed_fmt = format_interval(self.elapsed_time)
        if i == 0 or self.its_per <= 0:
            remaining_fmt = format_interval(0)
            rate_fmt = '?'
        else:
            remaining_fmt = format_interval((self.total - i) / self.its_per)
            rate_fmt = self._format_rate()

        count = self._format_count(i)
        total = self._format_count(self.total)
        return (f' {count}/{total} [{elapsed_fmt}<{remaining_fmt}, '
                f'{rate_fmt}{self.unit}/s{self._format_postfix()}]')

    def _render_unknown(self, i: int) -> str:
        self._measure(i)

        spinner = self._spinner[self._spinner_idx]
        self._spinner_idx = (self._spinner_idx + 1) % len(self._spinner)

        desc_sep = ': ' if self.desc else ''
        elapsed_fmt = format_interval(self.elapsed_time)
        return (f'{spinner} {self.desc}{desc_sep}{self._format_count(i)} '
                f'[{elapsed_fmt}, {self._format_rate()}{self.unit}/s{self._format_postfix()}]')

    def _set_ncols(self, text_length: int):
        """Resolve the meter width for a frame whose text is text_length long"""
        if not (self.dynamic_ncols or text_length + self.ncols + 2 - self.bar_length > 0):
            return

        if self._user_ncols is not None:
            self.ncols = self._user_ncols
            return

        columns = _get_terminal_columns()
        if columns:
            new_ncols = columns - text_length - 3
            if new_ncols >= 0:
                self.ncols = new_ncols
        else:
            self.ncols = _FALLBACK_NCOLS
            if not self.dynamic_ncols:
                # Not a terminal, don't probe again on every frame
                self._user_ncols = _FALLBACK_NCOLS
                logger.debug('No terminal width available, meter width pinned to %d', _FALLBACK_NCOLS)

    def _render_meter(self, progress: float) -> str:
        ncols = self.ncols
        charset = self._charset
        fill = self._fill

        if self.animation.is_block_style:
            nsyms = len(charset) - 1
            full_blocks, remainder = divmod_floor(int(progress * ncols * nsyms), nsyms)
            glyphs = charset[-1] * full_blocks
            if full_blocks < ncols:
                glyphs += charset[remainder + 1] + fill * (ncols - full_blocks - 1)
        else:
            filled = int(ncols * progress)
            glyphs = charset[-1] * filled
            if self.animation == Animation.ARROW:
                if filled < ncols:
                    glyphs += '>' + fill * (ncols - filled - 1)
            else:
                glyphs += fill * (ncols - filled)

        if self.colour != DEFAULT_COLOUR:
            glyphs = f'{self.colour}{glyphs}{Colors.RESET}'

        if self.animation.is_block_style:
            return f'|{glyphs}|'
        if self.animation == Animation.FIRACODE:
            end = _FIRACODE_END_DONE if progress >= 1.0 else _FIRACODE_END
            return f'{_FIRACODE_START}{glyphs}{end}'
        return f'[{glyphs}]'

    def _render(self, i: int) -> Tuple[str, str, str]:
        """Render the left text, meter and right text for counter value i"""
        progress, lbar = self._render_left(i)

        if progress >= 1.0:
            i = self.total
            if not self.leave:
                return ' ' * self.bar_length, '', '\r'

        rbar = self._render_right(i)
        self._set_ncols(len(lbar) + len(rbar) + 1)

        if self.ncols <= 0:
            self.bar_length = len(lbar) + len(rbar)
            return lbar, '', rbar

        self.bar_length = len(lbar) + len(rbar) + self.ncols + 2
        return lbar, self._render_meter(progress), rbar

    def _display(self):
        if self.total:
            lbar, mbar, rbar = self._render(self.n)
            text = lbar + mbar + rbar
        else:
            text = self._render_unknown(self.n)
            self.bar_length = len(text)

        self._write_frame(text)

    # ------------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------------

    def _write_frame(self, text: str):
        if self.file is not None:
            self.file.write(text + '\n')
            self.file.flush()
            return

        self._get_coordinator().write_at(self._stream(), text, self.position)

    def clear(self):
        """Clear the current bar display"""
        if self.disable or self.file is not None:
            return

        width = self.bar_length or _get_terminal_columns()
        self._get_coordinator().clear(self._stream(), width, self.position)

    def close(self):
        """Finish the display: end the bar's line, or erase it if not leaving"""
        if self._closed or self.disable or self.file is not None or not self.bar_length:
            return

        self._closed = True
        if not self.leave:
            self.clear()
        elif self.position == 0:
            self._get_coordinator().write_line(self._stream(), '\n')

    def write(self, text: str):
        """Print a message to stdout without overlapping the bar"""
        self.clear()
        self._get_coordinator().write_line(sys.stdout, f'{text}\n')

        if self.leave:
            self.refresh()

    def input(self, prompt: str = '') -> str:
        """Read one line from stdin without overlapping the bar"""
        self.clear()
        self._get_coordinator().write_line(sys.stdout, prompt)

        line = sys.stdin.readline()

        if self.leave:
            self.refresh()

        return line

    # ------------------------------------------------------------------------
    # Setters
    # ------------------------------------------------------------------------

    def set_description(self, desc: str):
        """Set the description shown before the bar"""
        self.desc = desc

    def set_postfix(self, postfix: str):
        """Set the extra stats shown after the rate"""
        self.postfix = postfix

    def set_colour(self, colour: str):
        """Set the meter colour (name, #rrggbb or 'default')"""
        self.colour = Colors.resolve(colour)

    def set_charset(self, charset: Sequence[str]):
        """
        Use a custom block-style charset for the meter.

        The first glyph is the empty cell and the last one the full cell; the
        glyphs in between are the partial fill levels.
        """
        if len(charset) < 2:
            raise ValueError("charset needs at least an empty and a full glyph")

        self._custom_charset = tuple(charset)
        self.animation = Animation.TQDM
        self._resolve_charset()

    def _resolve_charset(self):
        animation = self.animation
        self._fill = self.fill
        self._spinner = CLASSIC_SPINNER

        if self._custom_charset is not None:
            self._charset = self._custom_charset
        elif animation == Animation.TQDM_ASCII or (self.ascii and animation.is_block_style):
            self._charset = TQDM_ASCII_CHARSET
        elif animation == Animation.FILLUP:
            self._charset = FILLUP_CHARSET
        elif animation == Animation.CLASSIC:
            self._charset = ('#',)
            self._fill = '.'
        elif animation == Animation.ARROW:
            self._charset = ('=',)
        elif animation == Animation.FIRACODE:
            self._charset = (_FIRACODE_FILLED,)
            self._fill = _FIRACODE_EMPTY
            self._spinner = FIRACODE_SPINNER
        else:
            self._charset = TQDM_CHARSET

    def monitor(self, interval: float) -> Tuple['SharedBar', threading.Thread]:
        """Share this bar and refresh it from a background thread, see meterline.monitor"""
        return monitor(self, interval)


# ============================================================================
# Monitor
# ============================================================================

class SharedBar:
    """Lock-protected handle to a bar updated from several threads"""

    def __init__(self, bar: Bar):
        self.bar = bar
        self._lock = threading.RLock()

    @contextmanager
    def lock(self):
        """Context manager yielding the bar while holding its lock"""
        with self._lock:
            yield self.bar

    def update(self, n: int = 1):
        with self.lock() as bar:
            bar.update(n)

    def refresh(self):
        with self.lock() as bar:
            bar.refresh()

    def completed(self) -> bool:
        with self.lock() as bar:
            return bar.completed()


def monitor(bar: Union[Bar, SharedBar], interval: float) -> Tuple[SharedBar, threading.Thread]:
    """
    Refresh a bar every `interval` seconds from a daemon thread until it completes.

    Example:
        shared, thread = monitor(Bar(total=100), 1.0)
        for _ in range(100):
            shared.update(1)
            slow_work()
        thread.join()

    Args:
        bar: Bar to monitor, or an existing shared handle
        interval: Seconds between refreshes

    Returns:
        The shared handle to keep updating the bar with, and the monitor thread
    """
    if interval <= 0:
        raise ValueError("interval must be positive")

    shared = bar if isinstance(bar, SharedBar) else SharedBar(bar)
    thread = threading.Thread(target=_monitor_loop,
                              args=(shared, interval),
                              name='meterline-monitor',
                              daemon=True)
    thread.start()

    return shared, thread


def _monitor_loop(shared: SharedBar, interval: float):
    """Force refreshes of a shared bar until it completes"""
    error_count = 0
    max_errors = 10

    while True:
        time.sleep(interval)

        with shared.lock() as bar:
            if bar.completed():
                break

            try:
                bar.refresh()
                error_count = 0  # Reset on success
            except Exception:
                error_count += 1
                if error_count <= max_errors:
                    logger.exception('Monitor refresh failed (error %d/%d)', error_count, max_errors)
                elif error_count == max_errors + 1:
                    logger.error('Monitor: suppressing further errors')

    logger.debug('Monitor for bar %r finished', shared.bar.desc)
