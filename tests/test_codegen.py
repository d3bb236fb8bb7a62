import logging

import pytest

from reptree import DecisionNode, DecisionTree, Instance


def _compile(source, name):
    namespace = {}
    exec(source, namespace)
    return namespace[name]


def test_single_leaf_tree_code():
    tree = DecisionTree(DecisionNode.leaf("play"))
    source = tree.generate_test_code_source("classify")
    assert source == "def classify(test_data):\n    return 'play'\n    return ''\n"
    classify = _compile(source, "classify")
    assert classify([]) == "play"
    assert classify(["anything", "3"]) == "play"


def test_discrete_tree_code(weather_tree_root):
    source = DecisionTree(weather_tree_root).generate_test_code_source("classify")
    assert source == (
        "def classify(test_data):\n"
        "    if len(test_data) > 0 and test_data[0] == 'sunny':\n"
        "        return 'play'\n"
        "    elif len(test_data) > 0 and test_data[0] == 'rainy':\n"
        "        return 'no-play'\n"
        "    return ''\n"
    )
    classify = _compile(source, "classify")
    assert classify(["cloudy"]) == ""
    assert classify([]) == ""


def test_threshold_tree_code_includes_number_helper(mixed_tree_root):
    source = DecisionTree(mixed_tree_root).generate_test_code_source("classify")
    assert "    def _field_number(i):\n" in source
    assert "_field_number(1) <= 25.0" in source
    assert "_field_number(1) > 25.0" in source
    classify = _compile(source, "classify")
    assert classify(["sunny", "20"]) == "play"
    assert classify(["sunny", "30.5"]) == "no-play"


def test_generated_code_matches_predict(mixed_tree_root, mixed_instances):
    tree = DecisionTree(mixed_tree_root)
    predict_weather = _compile(tree.generate_test_code_source("predict_weather"), "predict_weather")
    for inst in mixed_instances:
        fields = ["" if a is None else str(a) for a in inst.attributes]
        assert predict_weather(fields) == (tree.predict_label(inst) or "")


@pytest.mark.parametrize("fields, attributes", [
    (["sunny"], ["sunny"]),                  # short record
    (["sunny", ""], ["sunny", None]),        # empty field
    (["sunny", "warm"], ["sunny", None]),    # non-numeric field
    ([], []),
])
def test_generated_code_undecidable_records(mixed_tree_root, fields, attributes):
    tree = DecisionTree(mixed_tree_root)
    classify = _compile(tree.generate_test_code_source("classify"), "classify")
    padded = attributes + [None] * (2 - len(attributes))
    assert tree.predict_label(Instance("?", padded)) is None
    assert classify(fields) == ""


def test_generate_test_code_writes_file(weather_tree_root, tmp_path):
    tree = DecisionTree(weather_tree_root)
    path = tmp_path / "generated.py"
    assert tree.generate_test_code(path, "classify") is True
    assert path.read_text(encoding="utf-8") == tree.generate_test_code_source("classify")


def test_generate_test_code_write_failure_is_logged(weather_tree_root, tmp_path, caplog):
    tree = DecisionTree(weather_tree_root)
    path = tmp_path / "missing_dir" / "generated.py"
    with caplog.at_level(logging.ERROR, logger="reptree"):
        assert tree.generate_test_code(path, "classify") is False
    assert "Could not write generated code" in caplog.text


@pytest.mark.parametrize("name", ["class", "1abc", "has space", ""])
def test_invalid_method_name(weather_tree_root, name):
    with pytest.raises(ValueError):
        DecisionTree(weather_tree_root).generate_test_code_source(name)
