from pathlib import Path

from reptree import DecisionNode, DecisionTree, Instance, InstanceList
from reptree.utils.logging import configure_logging

configure_logging("INFO")

# outlook (0): sunny / rainy / overcast, temperature (1): continuous
sunny = DecisionNode.threshold_split(
    1, 25.0,
    DecisionNode.leaf("play", {"play": 4}),
    DecisionNode.leaf("no-play", {"no-play": 2, "play": 1}),
    distribution={"play": 5, "no-play": 2},
)
root = DecisionNode.discrete_split(
    0,
    {
        "sunny": sunny,
        "rainy": DecisionNode.leaf("no-play", {"no-play": 3}),
        "overcast": DecisionNode.leaf("play", {"play": 2}),
    },
    distribution={"play": 7, "no-play": 5},
)
tree = DecisionTree(root)

print(tree.predict(Instance("?", ["sunny", 31.0])))
print(tree.predict_probability(Instance("?", ["sunny", 31.0])))

prune_set = InstanceList([
    Instance("play", ["sunny", 20.0]),
    Instance("play", ["sunny", 30.0]),
    Instance("no-play", ["rainy", 12.0]),
    Instance("no-play", ["rainy", 15.0]),
    Instance("play", ["overcast", 22.0]),
])
print("before:", tree.test_classifier(prune_set))
tree.prune(prune_set)
print("after: ", tree.test_classifier(prune_set))

out = Path("weather_tree.txt")
tree.save_txt(out)
print(DecisionTree(out).to_text())
tree.generate_test_code("weather_classifier.py", "classify_weather")
