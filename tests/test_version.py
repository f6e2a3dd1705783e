from focst.version import VERSION, info


def test_info_text():
    assert info() == "focst 0.1.3\ncommit: unknown\nbuild: unknown"


def test_info_has_three_lines_starting_with_version():
    lines = info().splitlines()
    assert len(lines) == 3
    assert lines[0] == f"focst {VERSION}"