import io

import pytest

from serpentcli import flags
from serpentcli.flags import Flag, FlagError, FlagSet, HelpRequested, ParseErrorsWhitelist


def make_set():
    fs = FlagSet("c")
    fs.output = io.StringIO()
    return fs


def test_long_flags_and_dash():
    fs = make_set()
    fs.add_int("intf", -1)
    fs.add_string("sf", "")
    fs.parse(["--intf=7", "--sf=abc", "one", "--", "two"])
    assert fs.get("intf") == 7
    assert fs.get("sf") == "abc"
    assert fs.args() == ["one", "two"]
    assert fs.args_len_at_dash() == 1


def test_args_len_at_dash_defaults_to_minus_one():
    fs = make_set()
    fs.parse(["one"])
    assert fs.args_len_at_dash() == -1


def test_short_flags():
    fs = make_set()
    fs.add_int("intf", -1, shorthand="i")
    fs.add_string("sf", "", shorthand="s")
    fs.parse(["-i", "7", "-sabc", "one", "two"])
    assert fs.get("intf") == 7
    assert fs.get("sf") == "abc"
    assert fs.args() == ["one", "two"]


def test_short_with_equals_and_attached():
    fs = make_set()
    fs.add_int("intf", -1, shorthand="i")
    fs.parse(["-i=10"])
    assert fs.get("intf") == 10
    fs.parse(["-i7"])
    assert fs.get("intf") == 7


def test_combined_bool_shorthands():
    fs = make_set()
    fs.add_bool("alpha", shorthand="a")
    fs.add_bool("beta", shorthand="b")
    fs.parse(["-ab"])
    assert fs.get_bool("alpha") is True
    assert fs.get_bool("beta") is True


def test_bool_explicit_value():
    fs = make_set()
    fs.add_bool("flag", True)
    fs.parse(["--flag=false"])
    assert fs.get_bool("flag") is False


def test_empty_inputs_kept_as_args():
    fs = make_set()
    fs.add_int("intf", -1, shorthand="i")
    fs.parse(["", "-i7", ""])
    assert fs.get("intf") == 7
    assert fs.args() == ["", ""]


def test_changed_tracking():
    fs = make_set()
    flag = fs.add_int("intf", -1)
    assert flag.changed is False
    fs.parse(["--intf", "3"])
    assert flag.changed is True
    assert fs.get("intf") == 3


def test_unknown_long_flag():
    fs = make_set()
    with pytest.raises(FlagError) as info:
        fs.parse(["--unknown-flag"])
    assert str(info.value) == "unknown flag: --unknown-flag"
    assert "unknown flag: --unknown-flag" in fs.output.getvalue()


def test_unknown_shorthand():
    fs = make_set()
    with pytest.raises(FlagError) as info:
        fs.parse(["-v"])
    assert "unknown shorthand flag: 'v' in -v" in str(info.value)


def test_flag_needs_argument():
    fs = make_set()
    fs.add_string("notversion", "", "not a version flag", "v")
    with pytest.raises(FlagError) as info:
        fs.parse(["-v"])
    assert "flag needs an argument: 'v' in -v" in str(info.value)


def test_invalid_int_value():
    fs = make_set()
    fs.add_int("intf", -1, shorthand="i")
    with pytest.raises(FlagError) as info:
        fs.parse(["-iabc"])
    assert "invalid syntax" in str(info.value)


@pytest.mark.parametrize("arg", ["--help", "-h"])
def test_help_requested_without_help_flag(arg):
    fs = make_set()
    with pytest.raises(HelpRequested):
        fs.parse([arg])


def test_whitelist_unknown_flags_consumes_value():
    fs = make_set()
    fs.parse_errors_whitelist = ParseErrorsWhitelist(unknown_flags=True)
    fs.add_bool("boola", shorthand="a")
    fs.parse(["-a", "--unknown", "flag"])
    assert fs.get_bool("boola") is True
    assert fs.args() == []


def test_whitelist_unknown_with_equals_keeps_next():
    fs = make_set()
    fs.parse_errors_whitelist = ParseErrorsWhitelist(unknown_flags=True)
    fs.parse(["--unknown=x", "keep"])
    assert fs.args() == ["keep"]


def test_get_errors():
    fs = make_set()
    fs.add_int("intf", 1)
    with pytest.raises(FlagError):
        fs.get_bool("intf")
    with pytest.raises(FlagError):
        fs.get("missing")


def test_set_round_trip_and_missing():
    fs = make_set()
    flag = fs.add_int("count", 0)
    fs.set("count", "42")
    assert flag.value_string == "42"
    assert flag.changed is True
    with pytest.raises(FlagError):
        fs.set("nothing", "1")


def test_normalize_lookup():
    fs = make_set()
    fs.add_bool("flagname", True)
    fs.set_normalize_func(lambda _fs, name: name.upper())
    assert fs.lookup("flagname") is fs.lookup("FLAGNAME")
    assert fs.lookup("flagname") is not None


def test_normalize_renames_flags():
    fs = make_set()
    fs.add_bool("flagname", True)
    fs.set_normalize_func(lambda _fs, name: name.upper())
    fs.set_normalize_func(lambda _fs, name: name)
    assert fs.lookup("flagname") is None
    assert fs.lookup("FLAGNAME").name == "FLAGNAME"


def test_iteration_order():
    names = ["C", "B", "A", "D"]
    fs = make_set()
    for name in names:
        fs.add_bool(name)
    assert [f.name for f in fs] == sorted(names)
    fs.sort_flags = False
    assert [f.name for f in fs] == names


def test_redefinition_errors():
    fs = make_set()
    fs.add_bool("x", shorthand="v")
    with pytest.raises(FlagError):
        fs.add_bool("x")
    with pytest.raises(FlagError):
        fs.add_string("other", shorthand="v")


def test_add_flag_set_shares_and_skips():
    a = make_set()
    b = make_set()
    a.add_int("x", 1)
    b.add_int("x", 2)
    b.add_int("y", 3)
    a.add_flag_set(b)
    assert a.get("x") == 1
    assert a.lookup("y") is b.lookup("y")
    a.add_flag_set(None)
    assert len(a) == 2


def test_available_flags_and_hidden():
    fs = make_set()
    assert fs.has_flags() is False
    fs.add_bool("secret")
    fs.mark_hidden("secret")
    assert fs.has_flags() is True
    assert fs.has_available_flags() is False
    assert fs.flag_usages() == ""


def test_mark_deprecated():
    fs = make_set()
    fs.add_bool("deprecated", shorthand="d")
    fs.mark_deprecated("deprecated", "This flag is deprecated")
    assert fs.lookup("deprecated").hidden is True
    fs.parse(["-d"])
    assert "This flag is deprecated" in fs.output.getvalue()
    with pytest.raises(FlagError):
        fs.mark_deprecated("deprecated", "")
    with pytest.raises(FlagError):
        fs.mark_deprecated("missing", "gone")


def test_flag_usages_layout():
    fs = make_set()
    fs.add_bool("help", False, "help for root", "h")
    assert fs.flag_usages() == "  -h, --help   help for root\n"


def test_flag_usages_var_names():
    fs = make_set()
    fs.add_int("intf", 0, "an int", "i")
    fs.add_string("out", "", "set `dir` path")
    text = fs.flag_usages()
    assert "-i, --intf int" in text
    assert "--out dir" in text
    assert "set dir path" in text


def test_set_annotation():
    fs = make_set()
    fs.add_string("name")
    fs.set_annotation("name", "key", ["true"])
    assert fs.lookup("name").annotations["key"] == ["true"]
    with pytest.raises(FlagError):
        fs.set_annotation("missing", "key", ["true"])


def test_shorthand_lookup():
    fs = make_set()
    flag = fs.add_bool("verbose", shorthand="v")
    assert fs.shorthand_lookup("v") is flag
    assert fs.shorthand_lookup("") is None
    with pytest.raises(ValueError):
        fs.shorthand_lookup("vv")


def test_reset_command_line():
    flags.COMMAND_LINE.add_bool("boolflag")
    fresh = flags.reset_command_line()
    assert flags.COMMAND_LINE is fresh
    assert fresh.lookup("boolflag") is None


def test_flag_value_string_for_bool():
    flag = Flag(name="b", value_type="bool", value=False, def_value="false")
    flag.set_value("true")
    assert flag.value is True
    assert flag.value_string == "true"
    with pytest.raises(ValueError):
        flag.set_value("maybe")