import io
import sys

from serpentcli.streams import StreamsMixin


class _Node(StreamsMixin):
    def __init__(self, parent=None):
        self.parent = parent


def test_defaults_are_process_streams():
    node = _Node()
    assert StreamsMixin.out_or_stdout(node) is sys.stdout
    assert StreamsMixin.out_or_stderr(node) is sys.stderr
    assert StreamsMixin.err_or_stderr(node) is sys.stderr
    assert StreamsMixin.in_or_stdin(node) is sys.stdin


def test_none_reverts_to_process_streams():
    node = _Node()
    StreamsMixin.set_output(node, None)
    node.out = None
    node.err = None
    node.input = None
    assert StreamsMixin.out_or_stdout(node) is sys.stdout
    assert StreamsMixin.err_or_stderr(node) is sys.stderr
    assert StreamsMixin.in_or_stdin(node) is sys.stdin


def test_set_output_sets_both():
    node = _Node()
    buffer = io.StringIO()
    StreamsMixin.set_output(node, buffer)
    assert StreamsMixin.out_or_stdout(node) is buffer
    assert StreamsMixin.err_or_stderr(node) is buffer


def test_child_inherits_parent_streams():
    root = _Node()
    child = _Node(root)
    grandchild = _Node(child)
    out, err, inp = io.StringIO(), io.StringIO(), io.StringIO("data")
    root.out, root.err, root.input = out, err, inp
    assert StreamsMixin.out_or_stdout(grandchild) is out
    assert StreamsMixin.out_or_stderr(grandchild) is out
    assert StreamsMixin.err_or_stderr(grandchild) is err
    assert StreamsMixin.in_or_stdin(grandchild) is inp


def test_child_stream_overrides_parent():
    root = _Node()
    child = _Node(root)
    parent_out = io.StringIO()
    root.out = parent_out
    own = io.StringIO()
    child.out = own
    assert StreamsMixin.out_or_stdout(child) is own
    assert StreamsMixin.out_or_stdout(root) is parent_out


def test_print_redirection():
    err_buffer, out_buffer = io.StringIO(), io.StringIO()
    node = _Node()
    node.err = err_buffer
    node.out = out_buffer

    StreamsMixin.print_err(node, "PrintErr")
    StreamsMixin.print_errln(node, "PrintErr", "line")
    StreamsMixin.print_errf(node, "PrintEr%s", "r")

    StreamsMixin.print(node, "Print")
    StreamsMixin.println(node, "Print", "line")
    StreamsMixin.printf(node, "Prin%s", "t")

    assert err_buffer.getvalue() == "PrintErrPrintErr line\nPrintErr"
    assert out_buffer.getvalue() == "PrintPrint line\nPrint"


def test_print_falls_back_to_stderr(capsys):
    node = _Node()
    StreamsMixin.print(node, "to-stderr")
    captured = capsys.readouterr()
    assert captured.err == "to-stderr"
    assert captured.out == ""


def test_print_spacing_between_non_strings():
    buffer = io.StringIO()
    node = _Node()
    node.out = buffer
    StreamsMixin.print(node, 1, 2)
    StreamsMixin.print(node, "|")
    StreamsMixin.print(node, "a", 3, "b")
    assert buffer.getvalue() == "1 2|a3b"


def test_printf_without_arguments_keeps_percent():
    buffer = io.StringIO()
    node = _Node()
    node.out = buffer
    StreamsMixin.printf(node, "100% done")
    assert buffer.getvalue() == "100% done"


def test_usage_capture_merges_streams():
    buffer = io.StringIO()
    node = _Node()
    StreamsMixin.set_output(node, buffer)
    StreamsMixin.print(node, "[stdout1]")
    StreamsMixin.print_err(node, "[stderr2]")
    StreamsMixin.print(node, "[stdout3]")
    assert buffer.getvalue() == "[stdout1][stderr2][stdout3]"