import threading

from signup_suite.reporting import ReportSink, safe_name


def test_safe_name_flattens_test_ids():
    assert safe_name("tests/live/test_login_ui.py::test_login[valid user]") == (
        "tests_live_test_login_ui.py_test_login_valid_user"
    )
    assert safe_name("///") == "attachment"
    assert len(safe_name("x" * 500)) == 120


def test_in_memory_sink_keeps_order_and_writes_nothing(tmp_path):
    sink = ReportSink()

    first = sink.attach_bytes("screenshot-a", b"png")
    second = sink.attach_text("api-response-api-verifyLogin", '{"responseCode": 200}', extension="json")

    assert sink.attachments == [first, second]
    assert first.path is None
    assert second.media_type == "application/json"
    assert second.text == '{"responseCode": 200}'
    assert sink.named("api-response") == [second]


def test_directory_sink_writes_numbered_files(tmp_path):
    sink = ReportSink(tmp_path / "out")

    sink.attach_text("notes", "hello")
    shot = sink.attach_bytes("screenshot-tests/x.py::t", b"\x89PNG")

    assert shot.path == tmp_path / "out" / "0002-screenshot-tests_x.py_t.png"
    assert (tmp_path / "out" / "0001-notes.txt").read_text(encoding="utf-8") == "hello"


def test_concurrent_attachments_are_all_kept(tmp_path):
    sink = ReportSink(tmp_path)

    def worker(index):
        for n in range(25):
            sink.attach_text(f"w{index}-{n}", "x")

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(sink) == 100
    assert len(list(tmp_path.iterdir())) == 100
