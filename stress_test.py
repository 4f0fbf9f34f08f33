"""
Stress tests / adversarial evaluation of treepatch.

Random trees are generated and mutated, then this script tries to BREAK:
  1. Idempotence (diff(x, x) is empty)
  2. Round-trip (apply(diff(a, b), a) == b), with many removals per parent
  3. Tag mismatch exclusivity (nothing below a ReplaceNode)
  4. Attribute patch completeness
  5. Value semantics (inputs untouched, outputs unshared)
  6. Error handling on scripts replayed against the wrong tree
  7. JSON round-trip of trees and scripts

Run directly:  python stress_test.py
"""

import sys, os, random, time
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from treepatch.core import Node
from treepatch.patch import RemoveNode, ReplaceNode, RemoveAttribute, SetAttribute, apply
from treepatch.diff import diff
from treepatch.errors import PatchError
from treepatch.formats import to_json, from_json, patches_to_json, patches_from_json


def test(name, condition, detail=""):
    status = "PASS" if condition else "FAIL"
    print(f"  [{status}] {name}" + (f"  ({detail})" if detail else ""))
    return condition


TAGS = ["div", "span", "p", "ul", "li", "a"]
KEYS = ["id", "class", "href", "size", "hidden"]


def random_value(rng):
    kind = rng.randrange(3)
    if kind == 0:
        return rng.choice(["x", "y", "z", ""])
    if kind == 1:
        return rng.choice([0, 1, 2.5, -4])
    return rng.choice([True, False])


def random_tree(rng, depth=3, width=4):
    attrs = {k: random_value(rng) for k in rng.sample(KEYS, rng.randrange(len(KEYS)))}
    n_children = rng.randrange(width + 1) if depth > 0 else 0
    children = [random_tree(rng, depth - 1, width) for _ in range(n_children)]
    return Node(rng.choice(TAGS), attrs, children)


def mutate(rng, node, rate=0.3):
    """Return a tree resembling `node`, with random local edits."""
    tag = node.tag
    if rng.random() < rate / 4:
        tag = rng.choice(TAGS)
    attrs = {k: v for k, v in node.attributes.items() if rng.random() > rate / 2}
    if rng.random() < rate:
        attrs[rng.choice(KEYS)] = random_value(rng)
    children = [mutate(rng, c, rate) for c in node.children]
    if children and rng.random() < rate:
        # Drop a whole trailing run: several removals under one parent.
        del children[rng.randrange(len(children)):]
    if rng.random() < rate:
        children.extend(random_tree(rng, 1) for _ in range(rng.randrange(1, 3)))
    return Node(tag, attrs, children)


rng = random.Random(42)
PAIRS = []
for _ in range(300):
    a = random_tree(rng)
    PAIRS.append((a, mutate(rng, a)))


# ═══════════════════════════════════════════════════════════════
#  §1  IDEMPOTENCE
# ═══════════════════════════════════════════════════════════════

print("=" * 70)
print("  §1  IDEMPOTENCE — diff(x, x) == []")
print("=" * 70)

non_empty = sum(1 for a, _ in PAIRS if diff(a, a.copy()))
test("diff of a tree with its own copy is empty", non_empty == 0,
     f"{non_empty} non-empty of {len(PAIRS)}")


# ═══════════════════════════════════════════════════════════════
#  §2  ROUND-TRIP
# ═══════════════════════════════════════════════════════════════

print()
print("=" * 70)
print("  §2  ROUND-TRIP — apply(diff(a, b), a) == b")
print("=" * 70)

failures = 0
multi_removal_pairs = 0
for a, b in PAIRS:
    script = diff(a, b)
    parents = [p.path[:-1] for p in script if isinstance(p, RemoveNode)]
    if len(parents) != len(set(parents)):
        multi_removal_pairs += 1
    result = apply(script, a)
    if not result.ok or result.tree != b:
        failures += 1
        if failures <= 3:
            print(f"    MISMATCH: {result!r}")

test("round-trip holds for all random pairs", failures == 0,
     f"{failures} failures of {len(PAIRS)}")
test("corpus exercises several removals under one parent", multi_removal_pairs > 0,
     f"{multi_removal_pairs} pairs")


# ═══════════════════════════════════════════════════════════════
#  §3  TAG MISMATCH EXCLUSIVITY
# ═══════════════════════════════════════════════════════════════

print()
print("=" * 70)
print("  §3  TAG MISMATCH — a ReplaceNode has nothing below it")
print("=" * 70)

violations = 0
for a, b in PAIRS:
    script = diff(a, b)
    replaced = [p.path for p in script if isinstance(p, ReplaceNode)]
    for p in script:
        for r in replaced:
            if len(p.path) > len(r) and p.path[:len(r)] == r:
                violations += 1
    for r in replaced:
        src_node, tar_node = a.at(r), b.at(r)
        if src_node is None or src_node.tag == tar_node.tag:
            violations += 1

test("ReplaceNode only at tag changes, never with patches under it",
     violations == 0, f"{violations} violations")


# ═══════════════════════════════════════════════════════════════
#  §4  ATTRIBUTE COMPLETENESS
# ═══════════════════════════════════════════════════════════════

print()
print("=" * 70)
print("  §4  ATTRIBUTES — removed → RemoveAttribute, changed/added → SetAttribute")
print("=" * 70)

bad = 0
for _ in range(300):
    src = Node("x", {k: random_value(rng) for k in rng.sample(KEYS, rng.randrange(len(KEYS)))})
    tar = Node("x", {k: random_value(rng) for k in rng.sample(KEYS, rng.randrange(len(KEYS)))})
    expected = {RemoveAttribute((), k) for k in src.attributes if k not in tar.attributes}
    expected |= {SetAttribute((), k, v) for k, v in tar.attributes.items()
                 if src.attributes.get(k) != v}
    got = diff(src, tar)
    if set(got) != expected or len(got) != len(expected):
        bad += 1

test("attribute patches match the key-set difference exactly", bad == 0, f"{bad} mismatches")


# ═══════════════════════════════════════════════════════════════
#  §5  VALUE SEMANTICS
# ═══════════════════════════════════════════════════════════════

print()
print("=" * 70)
print("  §5  VALUE SEMANTICS")
print("=" * 70)

touched = 0
for a, b in PAIRS[:100]:
    a_before, b_before = a.copy(), b.copy()
    apply(diff(a, b), a)
    if a != a_before or b != b_before:
        touched += 1
test("diff/apply leave their inputs unchanged", touched == 0, f"{touched} changed")

shared = 0
for a, b in PAIRS[:100]:
    result = apply(diff(a, b), a).tree
    inputs = {id(n) for _, n in a.walk()} | {id(n) for _, n in b.walk()}
    if any(id(n) in inputs for _, n in result.walk()):
        shared += 1
test("result trees share no nodes with the inputs", shared == 0, f"{shared} shared")


# ═══════════════════════════════════════════════════════════════
#  §6  WRONG-TREE REPLAY
# ═══════════════════════════════════════════════════════════════

print()
print("=" * 70)
print("  §6  ERRORS — scripts replayed against the wrong tree")
print("=" * 70)

crashes = 0
errors = 0
for i, (a, b) in enumerate(PAIRS):
    other = PAIRS[(i + 1) % len(PAIRS)][0]
    try:
        result = apply(diff(a, b), other)
    except Exception as exc:  # anything but a returned PatchError is a bug
        crashes += 1
        print(f"    CRASH: {exc!r}")
        continue
    if not result.ok:
        errors += 1
        if not isinstance(result.error, PatchError) or result.tree is not None:
            crashes += 1

test("mismatched replays fail as values, never by raising", crashes == 0,
     f"{errors} returned errors, {crashes} crashes")


# ═══════════════════════════════════════════════════════════════
#  §7  JSON ROUND-TRIP
# ═══════════════════════════════════════════════════════════════

print()
print("=" * 70)
print("  §7  FORMATS — JSON round-trip")
print("=" * 70)

json_bad = 0
for a, b in PAIRS[:100]:
    script = diff(a, b)
    if from_json(to_json(a)) != a or patches_from_json(patches_to_json(script)) != script:
        json_bad += 1
test("trees and scripts survive JSON", json_bad == 0, f"{json_bad} failures")


# ═══════════════════════════════════════════════════════════════
#  §8  TIMING
# ═══════════════════════════════════════════════════════════════

print()
print("=" * 70)
print("  §8  TIMING")
print("=" * 70)

big_a = random_tree(rng, depth=6, width=5)
big_b = mutate(rng, big_a, rate=0.1)
t0 = time.perf_counter()
big_script = diff(big_a, big_b)
t1 = time.perf_counter()
big_result = apply(big_script, big_a)
t2 = time.perf_counter()
print(f"  tree of {big_a.size()} nodes → {len(big_script)} patches")
print(f"  diff:  {(t1 - t0) * 1000:.2f} ms")
print(f"  apply: {(t2 - t1) * 1000:.2f} ms")
test("large tree round-trips", big_result.ok and big_result.tree == big_b)
