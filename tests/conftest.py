import pytest

from reptree import DecisionNode, Instance, InstanceList


@pytest.fixture
def weather_tree_root():
    """outlook (attr 0) = sunny -> play, rainy -> no-play."""
    return DecisionNode.discrete_split(
        0,
        {
            "sunny": DecisionNode.leaf("play", {"play": 3, "no-play": 1}),
            "rainy": DecisionNode.leaf("no-play", {"no-play": 2}),
        },
        distribution={"play": 3, "no-play": 3},
    )


@pytest.fixture
def mixed_tree_root():
    """outlook (attr 0) then temperature (attr 1) threshold under sunny."""
    sunny = DecisionNode.threshold_split(
        1, 25.0,
        DecisionNode.leaf("play", {"play": 4}),
        DecisionNode.leaf("no-play", {"no-play": 2, "play": 1}),
        distribution={"play": 5, "no-play": 2},
    )
    return DecisionNode.discrete_split(
        0,
        {
            "sunny": sunny,
            "rainy": DecisionNode.leaf("no-play", {"no-play": 3}),
            "overcast": DecisionNode.leaf("play", {"play": 2}),
        },
        distribution={"play": 7, "no-play": 5},
    )


@pytest.fixture
def mixed_instances():
    return InstanceList([
        Instance("play", ["sunny", 20.0]),
        Instance("play", ["sunny", 25.0]),
        Instance("no-play", ["sunny", 30.5]),
        Instance("no-play", ["rainy", 10.0]),
        Instance("play", ["overcast", 18.0]),
        Instance("no-play", ["rainy", 28.0]),
        Instance("play", ["overcast", 31.0]),
        Instance("no-play", ["snowy", 0.0]),
        Instance("play", ["sunny", None]),
        Instance("no-play", ["sunny", 26.0]),
    ])
