from export_diff.fields import field_diff

from conftest import make_record


def test_identical_records_have_no_changes():
    old = make_record("p1", "Same", description="d", variables=[{"name": "x"}], model="gpt-4")
    new = make_record("p1", "Same", description="d", variables=[{"name": "x"}], model="gpt-4")
    assert field_diff(old, new) == []


def test_changes_follow_field_order_with_variables_last():
    old = make_record("p1", "Old", temperature=0.7, variables=[{"name": "a"}])
    new = make_record("p1", "New", temperature=0.9, variables=[{"name": "b"}])

    changes = field_diff(old, new)

    assert [c.field for c in changes] == ["content", "temperature", "variables"]
    assert (changes[0].old_value, changes[0].new_value) == ("Old", "New")
    assert (changes[1].old_value, changes[1].new_value) == ("0.7", "0.9")
    assert changes[2].old_value == '[{"name":"a"}]'
    assert changes[2].new_value == '[{"name":"b"}]'


def test_absent_values_equal_empty():
    old = make_record("p1", "x")
    new = make_record("p1", "x", description="", variables=[])
    assert field_diff(old, new) == []


def test_added_scalar_field_renders_absent_side_as_empty():
    changes = field_diff(make_record("p1", "x"), make_record("p1", "x", model="gpt-4"))
    assert len(changes) == 1
    assert changes[0].field == "model"
    assert changes[0].old_value == ""
    assert changes[0].new_value == "gpt-4"


def test_system_prompt_is_compared():
    changes = field_diff(
        make_record("p1", "x", systemPrompt="Be brief"),
        make_record("p1", "x", systemPrompt="Be verbose"),
    )
    assert [c.field for c in changes] == ["systemPrompt"]


def test_variable_order_matters():
    old = make_record("p1", "x", variables=[{"name": "a"}, {"name": "b"}])
    new = make_record("p1", "x", variables=[{"name": "b"}, {"name": "a"}])
    assert [c.field for c in field_diff(old, new)] == ["variables"]


def test_zero_temperature_is_not_empty():
    changes = field_diff(make_record("p1", "x"), make_record("p1", "x", temperature=0))
    assert [(c.field, c.old_value, c.new_value) for c in changes] == [("temperature", "", "0")]


def test_untracked_fields_are_ignored():
    old = make_record("p1", "x", name="Old name", version="1", tags=["a"])
    new = make_record("p1", "x", name="New name", version="2", tags=["b"])
    assert field_diff(old, new) == []
