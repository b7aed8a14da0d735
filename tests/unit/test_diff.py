"""Tests for the structural diff and the patch schema."""

import jsonpatch
import pytest

from secret_puller_injector.core.config import InjectorConfig
from secret_puller_injector.core.diff import diff
from secret_puller_injector.core.schema.patch_dsl import Patch, PatchOp
from secret_puller_injector.k8s.constants import INJECTOR_ANNOTATION
from secret_puller_injector.k8s.mutator import mutate

CONFIG = InjectorConfig(vault_addr="https://vault.internal:8200")

DEPLOYMENT = {
    "apiVersion": "apps/v1",
    "kind": "Deployment",
    "metadata": {"name": "payments-api"},
    "spec": {
        "template": {
            "metadata": {"annotations": {INJECTOR_ANNOTATION: "true"}},
            "spec": {"containers": [{"name": "app", "image": "myimage:v1"}]},
        }
    },
}


class TestPatchSchema:
    """Tests for PatchOp and Patch."""

    def test_unknown_operation_rejected(self):
        """Test only add, replace and remove are accepted."""
        with pytest.raises(ValueError):
            PatchOp("move", "/a")

    def test_remove_has_no_value(self):
        """Test remove serializes without a value."""
        assert PatchOp("remove", "/a").to_dict() == {"op": "remove", "path": "/a"}

    def test_add_serialization(self):
        """Test add serializes op, path and value."""
        op = PatchOp("add", "/a", {"b": 1})

        assert op.to_dict() == {"op": "add", "path": "/a", "value": {"b": 1}}

    def test_empty_patch(self):
        """Test empty patch is falsy and serializes to []."""
        patch = Patch()

        assert not patch
        assert len(patch) == 0
        assert patch.to_json() == "[]"


class TestDiffBasics:
    """Tests for generic diff behavior."""

    def test_equal_documents(self):
        """Test equal inputs give an empty patch."""
        assert len(diff(DEPLOYMENT, DEPLOYMENT)) == 0

    def test_added_key(self):
        """Test a new key is a single add of the whole value."""
        patch = diff({"a": 1}, {"a": 1, "b": [1, 2]})

        assert patch.to_serializable() == [{"op": "add", "path": "/b", "value": [1, 2]}]

    def test_removed_key(self):
        """Test a missing key is a remove."""
        patch = diff({"a": 1, "b": 2}, {"a": 1})

        assert patch.to_serializable() == [{"op": "remove", "path": "/b"}]

    def test_changed_scalar(self):
        """Test a changed scalar is a replace."""
        patch = diff({"a": {"b": "x"}}, {"a": {"b": "y"}})

        assert patch.to_serializable() == [{"op": "replace", "path": "/a/b", "value": "y"}]

    def test_bool_and_int_differ(self):
        """Test true and 1 are different JSON values."""
        patch = diff({"a": 1}, {"a": True})

        assert patch.operations() == ["replace"]

    def test_type_change(self):
        """Test a dict replaced by a list is a replace."""
        patch = diff({"a": {"b": 1}}, {"a": [1]})

        assert patch.to_serializable() == [{"op": "replace", "path": "/a", "value": [1]}]

    def test_list_append(self):
        """Test appended list items become indexed adds in ascending order."""
        patch = diff({"a": [1]}, {"a": [1, 2, 3]})

        assert patch.to_serializable() == [
            {"op": "add", "path": "/a/1", "value": 2},
            {"op": "add", "path": "/a/2", "value": 3},
        ]

    def test_list_shrink(self):
        """Test surplus items are removed highest index first."""
        patch = diff({"a": [1, 2, 3]}, {"a": [1]})

        assert patch.to_serializable() == [
            {"op": "remove", "path": "/a/2"},
            {"op": "remove", "path": "/a/1"},
        ]

    def test_pointer_escaping(self):
        """Test '/' and '~' in keys are escaped."""
        patch = diff({}, {"a/b": 1, "c~d": 2})

        assert [op.path for op in patch.ops] == ["/a~1b", "/c~0d"]

    def test_sorted_key_order(self):
        """Test added keys are emitted in sorted order regardless of insertion."""
        target = {"zeta": 1, "alpha": 2, "mid": 3}

        assert [op.path for op in diff({}, target).ops] == ["/alpha", "/mid", "/zeta"]

    def test_patch_applies(self):
        """Test a mixed diff reproduces the target when applied."""
        src = {"a": [1, 2, 3], "b": {"c": "x", "d": 1}, "e": True}
        dst = {"a": [1, 5], "b": {"c": "y", "f": [1]}, "g": None}

        patch = diff(src, dst)

        assert jsonpatch.apply_patch(src, patch.to_serializable()) == dst


class TestDiffOfMutation:
    """Tests for diffs produced from real mutations."""

    def test_worked_example_ops(self):
        """Test the example Deployment yields three adds."""
        mutated = mutate(DEPLOYMENT, CONFIG, "Deployment").mutated

        patch = diff(DEPLOYMENT, mutated)

        assert patch.operations() == ["add", "add", "add"]
        assert [op.path for op in patch.ops] == [
            "/spec/template/spec/containers/0/volumeMounts",
            "/spec/template/spec/initContainers",
            "/spec/template/spec/volumes",
        ]
        assert patch.ops[0].value == [{"name": "secrets", "mountPath": "/secrets"}]
        assert patch.ops[1].value[0]["name"] == "samson-secret-puller"
        assert len(patch.ops[2].value) == 3

    def test_existing_lists_only_adds(self):
        """Test existing volumes and mounts yield indexed adds only."""
        original = {
            "kind": "Pod",
            "metadata": {"annotations": {INJECTOR_ANNOTATION: "true"}},
            "spec": {
                "initContainers": [{"name": "migrate", "image": "m:1"}],
                "containers": [
                    {"name": "app", "image": "a:1",
                     "volumeMounts": [{"name": "data", "mountPath": "/data"}]},
                    {"name": "side", "image": "s:1"},
                ],
                "volumes": [{"name": "data", "emptyDir": {}}],
            },
        }
        mutated = mutate(original, CONFIG, "Pod").mutated

        patch = diff(original, mutated)

        assert set(patch.operations()) == {"add"}
        assert [op.path for op in patch.ops] == [
            "/spec/containers/0/volumeMounts/1",
            "/spec/containers/1/volumeMounts",
            "/spec/initContainers/1",
            "/spec/volumes/1",
            "/spec/volumes/2",
            "/spec/volumes/3",
        ]
        assert jsonpatch.apply_patch(original, patch.to_serializable()) == mutated

    def test_gate_skip_empty(self):
        """Test an unannotated Deployment yields an empty patch."""
        original = {
            "kind": "Deployment",
            "spec": {"template": {"metadata": {}, "spec": {"containers": [{"name": "app"}]}}},
        }
        mutated = mutate(original, CONFIG, "Deployment").mutated

        assert len(diff(original, mutated)) == 0

    def test_deterministic(self):
        """Test repeated diffs of the same pair are identical."""
        mutated = mutate(DEPLOYMENT, CONFIG, "Deployment").mutated

        assert diff(DEPLOYMENT, mutated).to_json() == diff(DEPLOYMENT, mutated).to_json()

    def test_null_lists_only_adds(self):
        """Test null initContainers, volumes and volumeMounts are overwritten with adds."""
        original = {
            "kind": "Pod",
            "metadata": {"annotations": {INJECTOR_ANNOTATION: "true"}},
            "spec": {
                "containers": [{"name": "app", "image": "a:1", "volumeMounts": None}],
                "initContainers": None,
                "volumes": None,
            },
        }
        mutated = mutate(original, CONFIG, "Pod").mutated

        patch = diff(original, mutated)

        assert patch.operations() == ["add", "add", "add"]
        assert [op.path for op in patch.ops] == [
            "/spec/containers/0/volumeMounts",
            "/spec/initContainers",
            "/spec/volumes",
        ]
        assert jsonpatch.apply_patch(original, patch.to_serializable()) == mutated

    def test_null_to_null_is_empty(self):
        """Test unchanged null members produce no operation."""
        assert len(diff({"a": None}, {"a": None})) == 0
