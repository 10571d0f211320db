import pytest

import meterline
from meterline import Animation, Bar, Colors


def last_frame(sink):
    return sink.writes[-1]


def draw(bar, n):
    bar.n = n
    bar.refresh()


def test_progress_fraction_is_clamped(coordinator, clock):
    bar = Bar(total=7, coordinator=coordinator)
    for n in range(0, 8):
        bar.n = n
        assert 0.0 <= bar.progress <= 1.0
    assert bar.progress == 1.0

    bar.n = 20
    assert bar.progress == 1.0


def test_final_frame_shows_total(coordinator, clock, sink):
    bar = Bar(total=5, ncols=5, coordinator=coordinator)
    clock.advance(1)
    draw(bar, 9)
    assert "100%" in last_frame(sink)
    assert " 5/5 [" in last_frame(sink)
    assert "9/5" not in last_frame(sink)


def test_left_segment_padding(coordinator, clock, sink):
    bar = Bar(total=100, desc="Load", ncols=4, coordinator=coordinator)
    clock.advance(1)

    draw(bar, 5)
    assert last_frame(sink).startswith("\rLoad:   5%|")

    draw(bar, 50)
    assert last_frame(sink).startswith("\rLoad:  50%|")

    draw(bar, 100)
    assert last_frame(sink).startswith("\rLoad: 100%|")


def test_no_description_has_no_separator(coordinator, clock, sink):
    bar = Bar(total=100, ncols=4, coordinator=coordinator)
    clock.advance(1)
    draw(bar, 50)
    assert last_frame(sink).startswith("\r 50%|")


def test_right_segment(coordinator, clock, sink):
    bar = Bar(total=10, ncols=4, coordinator=coordinator)
    bar.refresh()
    clock.advance(2)
    draw(bar, 4)
    assert last_frame(sink).endswith(" 4/10 [00:02<00:03, 2.00it/s]")


def test_zero_count_has_unknown_rate(coordinator, clock, sink):
    bar = Bar(total=10, ncols=4, coordinator=coordinator)
    bar.refresh()
    clock.advance(5)
    bar.refresh()
    assert last_frame(sink).endswith(" 0/10 [00:05<00:00, ?it/s]")


def test_unit_scale_and_postfix(coordinator, clock, sink):
    bar = Bar(total=2000, unit="B", unit_scale=True, ncols=4, coordinator=coordinator)
    bar.refresh()
    bar.set_postfix("file=a.bin")
    clock.advance(1)
    draw(bar, 1500)
    assert last_frame(sink).endswith(" 1.50k/2.00k [00:01<00:00, 1.50kB/s, file=a.bin]")


@pytest.mark.parametrize("animation, ncols, total, n, meter", [
    (Animation.TQDM, 8, 8, 4, "|████▏   |"),
    (Animation.TQDM, 4, 4, 4, "|████|"),
    (Animation.TQDM, 4, 4, 0, "|▏   |"),
    (Animation.TQDM_ASCII, 10, 100, 25, "|##6       |"),
    (Animation.FILLUP, 4, 2, 1, "|██▁ |"),
    (Animation.CLASSIC, 10, 10, 3, "[###.......]"),
    (Animation.ARROW, 10, 10, 3, "[===>      ]"),
    (Animation.ARROW, 10, 10, 10, "[==========]"),
    (Animation.FIRACODE, 4, 4, 2, "\uee03\uee04\uee04\uee01\uee01\uee02"),
    (Animation.FIRACODE, 2, 2, 2, "\uee03\uee04\uee04\uee05"),
])
def test_meter_families(coordinator, clock, sink, animation, ncols, total, n, meter):
    bar = Bar(total=total, ncols=ncols, animation=animation, coordinator=coordinator)
    clock.advance(1)
    draw(bar, n)
    assert meter in last_frame(sink)


def test_ascii_flag_uses_digit_charset(coordinator, clock, sink):
    bar = Bar(total=100, ncols=10, ascii=True, coordinator=coordinator)
    clock.advance(1)
    draw(bar, 25)
    assert "|##6       |" in last_frame(sink)


def test_custom_charset(coordinator, clock, sink):
    bar = Bar(total=2, ncols=2, animation=Animation.CLASSIC, coordinator=coordinator)
    bar.set_charset([" ", "o", "O"])
    clock.advance(1)
    draw(bar, 1)
    # 0.5 * 2 cells * 2 levels -> one full cell, then the first partial glyph
    assert "|Oo|" in last_frame(sink)


def test_set_charset_needs_two_glyphs():
    with pytest.raises(ValueError):
        Bar().set_charset(["#"])


def test_colour_wraps_glyphs_only(coordinator, clock, sink):
    bar = Bar(total=4, ncols=4, colour="red", coordinator=coordinator)
    clock.advance(1)
    draw(bar, 4)
    assert f"|{Colors.RED}████{Colors.RESET}|" in last_frame(sink)


def test_suppressed_meter(coordinator, clock, sink):
    bar = Bar(total=10, ncols=0, coordinator=coordinator)
    bar.refresh()
    clock.advance(1)
    draw(bar, 5)
    assert last_frame(sink) == "\r 50% 5/10 [00:01<00:01, 5.00it/s]"


def test_auto_width_fits_terminal(monkeypatch, coordinator, clock, sink):
    monkeypatch.setattr(meterline, "_get_terminal_columns", lambda: 80)
    bar = Bar(total=10, desc="Files", coordinator=coordinator)
    clock.advance(1)
    draw(bar, 3)
    assert len(last_frame(sink)) - 1 == 78
    assert bar.ncols > 10


def test_fallback_width_is_pinned(coordinator, clock):
    bar = Bar(total=10, coordinator=coordinator)
    draw(bar, 1)
    assert bar.ncols == 10
    assert bar._user_ncols == 10


def test_fallback_width_not_pinned_with_dynamic_ncols(coordinator, clock):
    bar = Bar(total=10, dynamic_ncols=True, coordinator=coordinator)
    draw(bar, 1)
    assert bar.ncols == 10
    assert bar._user_ncols is None


def test_dynamic_ncols_follows_resize(monkeypatch, coordinator, clock, sink):
    columns = [100]
    monkeypatch.setattr(meterline, "_get_terminal_columns", lambda: columns[0])
    bar = Bar(total=10, dynamic_ncols=True, coordinator=coordinator)
    clock.advance(1)
    draw(bar, 3)
    wide = bar.ncols
    columns[0] = 60
    draw(bar, 4)
    assert bar.ncols == wide - 40


def test_indefinite_mode_spinner(coordinator, clock, sink):
    bar = Bar(mininterval=0, coordinator=coordinator)
    for _ in range(5):
        bar.update(1)
        clock.advance(1)

    assert len(sink.writes) == 5
    spinners = [frame[1] for frame in sink.writes]
    assert spinners == ["\\", "|", "/", "-", "\\"]
    for frame in sink.writes:
        assert "%" not in frame
        assert "|" not in frame[2:]
    assert sink.writes[0] == "\r\\ 1 [00:00, ?it/s]"
    assert sink.writes[-1] == "\r\\ 5 [00:04, 1.25it/s]"


def test_indefinite_mode_description(coordinator, clock, sink):
    bar = Bar(desc="Scan", unit="files", mininterval=0, coordinator=coordinator)
    bar.refresh()
    clock.advance(2)
    bar.update(4)
    assert last_frame(sink) == "\r| Scan: 4 [00:02, 2.00files/s]"


def test_leave_false_erases_final_frame(coordinator, clock, sink):
    bar = Bar(total=2, leave=False, ncols=5, mininterval=0, coordinator=coordinator)
    clock.advance(1)
    bar.update(1)
    width = bar.bar_length
    bar.update(1)
    assert last_frame(sink) == "\r" + " " * width + "\r"


def test_set_description(coordinator, clock, sink):
    bar = Bar(total=10, ncols=4, coordinator=coordinator)
    bar.set_description("Stage 2")
    draw(bar, 5)
    assert last_frame(sink).startswith("\rStage 2:  50%|")
