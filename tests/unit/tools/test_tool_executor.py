import pytest

from sqlscout.tools import DocumentToolbox, ToolCall, ToolContext, ToolExecutionError, ToolExecutor


@pytest.fixture
def executor():
    return ToolExecutor(DocumentToolbox({"schema/overview.md": "# Overview\n- orders (BASE TABLE)\n"}))


@pytest.fixture
def ctx():
    return ToolContext(correlation_id="test-1")


@pytest.mark.asyncio
async def test_executes_known_tool(executor, ctx):
    call = ToolCall(id="call_1", name="read_document", arguments={"path": "schema/overview.md"})

    result = await executor.execute(call, ctx)

    assert result.call_id == "call_1"
    assert result.name == "read_document"
    assert result.content.startswith("# Overview")
    assert result.is_error is False


@pytest.mark.asyncio
async def test_unknown_tool_raises(executor, ctx):
    with pytest.raises(ToolExecutionError, match="Unknown tool"):
        await executor.execute(ToolCall(id="call_1", name="rm", arguments={}), ctx)


@pytest.mark.asyncio
async def test_bad_arguments_raise(executor, ctx):
    call = ToolCall(id="call_1", name="read_document", arguments={"file": "x"})

    with pytest.raises(ToolExecutionError, match="Invalid arguments"):
        await executor.execute(call, ctx)


@pytest.mark.asyncio
async def test_execute_or_report_turns_errors_into_results(executor, ctx):
    result = await executor.execute_or_report(ToolCall(id="call_9", name="rm", arguments={}), ctx)

    assert result.is_error is True
    assert result.call_id == "call_9"
    assert "Unknown tool: rm" in result.content


@pytest.mark.asyncio
async def test_toolboxes_are_independent():
    first = ToolExecutor(DocumentToolbox({"a.md": "alpha"}))
    second = ToolExecutor(DocumentToolbox({"b.md": "beta"}))
    ctx = ToolContext(correlation_id="test-2")

    listing = await second.execute(ToolCall(id="c", name="list_documents", arguments={}), ctx)

    assert listing.content == "b.md"
    assert first.toolbox.documents == {"a.md": "alpha"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "name,arguments,expected",
    [
        ("list_documents", {"prefix": None}, "schema/overview.md"),
        ("read_document", {"path": 5}, "Document not found: 5"),
        ("search_documents", {"pattern": 42, "prefix": None}, "No matches for '42'."),
    ],
)
async def test_non_string_arguments_are_coerced(executor, ctx, name, arguments, expected):
    result = await executor.execute(ToolCall(id="call_1", name=name, arguments=arguments), ctx)

    assert result.is_error is False
    assert expected in result.content


@pytest.mark.asyncio
async def test_handler_failure_wrapped(executor, ctx, monkeypatch):
    def broken(path):
        raise AttributeError("'dict' object has no attribute 'strip'")

    monkeypatch.setitem(executor.toolbox._handlers, "read_document", broken)
    call = ToolCall(id="call_1", name="read_document", arguments={"path": {"nested": True}})

    with pytest.raises(ToolExecutionError, match="Tool read_document failed"):
        await executor.execute(call, ctx)

    reported = await executor.execute_or_report(call, ctx)
    assert reported.is_error is True
    assert "has no attribute" in reported.content
