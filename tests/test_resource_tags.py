from otlpmapping.resource_tags import ProcessAttributes, SystemAttributes

COMMAND_LINE = 'cmd/otelcol --config="/path/to/config.yaml"'


def test_process_extract_tags():
    pattrs = ProcessAttributes(
        executable_name="otelcol",
        executable_path="/usr/bin/cmd/otelcol",
        command="cmd/otelcol",
        command_line=COMMAND_LINE,
        pid=1,
        owner="root",
    )
    assert pattrs.extract_tags() == ["process.executable.name:otelcol"]

    pattrs = ProcessAttributes(
        executable_path="/usr/bin/cmd/otelcol",
        command="cmd/otelcol",
        command_line=COMMAND_LINE,
        pid=1,
        owner="root",
    )
    assert pattrs.extract_tags() == ["process.executable.path:/usr/bin/cmd/otelcol"]

    pattrs = ProcessAttributes(
        command="cmd/otelcol", command_line=COMMAND_LINE, pid=1, owner="root"
    )
    assert pattrs.extract_tags() == ["process.command:cmd/otelcol"]

    pattrs = ProcessAttributes(command_line=COMMAND_LINE, pid=1, owner="root")
    assert pattrs.extract_tags() == [f"process.command_line:{COMMAND_LINE}"]


def test_process_extract_tags_empty():
    assert ProcessAttributes().extract_tags() == []


def test_system_extract_tags():
    assert SystemAttributes(os_type="windows").extract_tags() == ["os.type:windows"]


def test_system_extract_tags_empty():
    assert SystemAttributes().extract_tags() == []