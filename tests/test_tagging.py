"""Tests for the tagging transformation"""

from types import SimpleNamespace

from components.tagging import TAGS, add_tags, label_property


def transform(props):
    args = SimpleNamespace(resource=None, type_="t", name="n", props=props, opts=None)
    return add_tags(TAGS)(args)


class TestLabelProperty:
    def test_aws_tags(self):
        assert label_property({"tags": None, "name": "x"}) == "tags"

    def test_gcp_labels(self):
        assert label_property({"labels": None}) == "labels"

    def test_input_type_object(self):
        assert label_property(SimpleNamespace(tags=None)) == "tags"

    def test_unlabelable(self):
        assert label_property({"role": "r", "policy_arn": "p"}) is None

    def test_no_props(self):
        assert label_property(None) is None


class TestAddTags:
    def test_adds_labels_when_none_declared(self):
        result = transform({"tags": None})
        assert result.props["tags"] == TAGS

    def test_keeps_declared_tags(self):
        result = transform({"tags": {"team": "chat"}})
        assert result.props["tags"] == {"team": "chat", **TAGS}

    def test_fixed_labels_win(self):
        result = transform({"labels": {"app": "other"}})
        assert result.props["labels"] == TAGS

    def test_input_type_object_is_updated_in_place(self):
        props = SimpleNamespace(tags=None, name="fn")
        result = transform(props)
        assert result.props is props
        assert props.tags == TAGS

    def test_no_op_without_label_property(self):
        props = {"role": "r"}
        assert transform(props) is None
        assert props == {"role": "r"}
