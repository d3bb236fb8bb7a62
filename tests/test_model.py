import pytest

from reptree import Instance, Model


class LookupModel(Model):
    """Predicts from a fixed table keyed on the first attribute."""

    def __init__(self, table):
        self.table = table

    def predict(self, instance):
        return self.table.get(instance.get_attribute(0).value)

    def predict_label(self, instance):
        return self.predict(instance)

    def predict_probability(self, instance):
        label = self.predict(instance)
        return {} if label is None else {label: 1.0}

    def save_txt(self, file_name):
        raise NotImplementedError


def test_predict_label_is_abstract():
    class NoLabel(Model):
        def predict(self, instance):
            return "x"

        def predict_probability(self, instance):
            return {"x": 1.0}

        def save_txt(self, file_name):
            pass

    with pytest.raises(TypeError):
        NoLabel()


def test_accuracy_mixes_undecided_and_correct():
    model = LookupModel({"a": "yes", "b": "no"})
    instances = [
        Instance("yes", ["a"]),
        Instance("no", ["b"]),
        Instance("yes", ["b"]),
        Instance("yes", ["c"]),
        Instance("no", ["c"]),
    ]
    perf = model.test_classifier(instances)
    assert perf.accuracy == pytest.approx(0.4)
    assert perf.n_instances == 5
    assert perf.n_undecided == 2


def test_undecided_never_matches_any_label():
    model = LookupModel({})
    perf = model.test_classifier([Instance("yes", ["a"]), Instance("", ["b"])])
    assert perf.accuracy == 0.0
    assert perf.n_undecided == 2


def test_predicted_label_outside_test_labels():
    model = LookupModel({"a": "maybe"})
    perf = model.test_classifier([Instance("yes", ["a"]), Instance("maybe", ["a"])])
    assert perf.accuracy == 0.5
    assert perf.n_undecided == 0


def test_get_maximum():
    assert Model.get_maximum(["a", "b", "b", "a", "c"]) == "a"
    assert Model.get_maximum(["c", "b", "b"]) == "b"
    assert Model.get_maximum([]) is None
