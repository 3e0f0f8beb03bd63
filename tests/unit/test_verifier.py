"""
Verifier Unit Tests
Tests for core/merkle/verifier.py

The verifiers are total: every malformed or adversarial input yields
False rather than an exception.
"""
import pytest

from core.crypto.hashing import keccak256
from core.merkle.merkle_tree import hash_leaf
from core.merkle.multiproof import get_multi_proof, get_proof_flags, get_proof_ids
from core.merkle.verifier import verify_with_flags, verify_with_ids
from fixtures import flip_byte, leaves_at, make_tree


@pytest.fixture
def proof_case():
    """A valid (tree, leaves, proof, flags, ids) tuple over 16 leaves."""
    tree = make_tree(16)
    leaves = leaves_at(tree, [2, 5, 6, 13])
    proof = get_multi_proof(tree, leaves)
    return (
        tree,
        leaves,
        proof,
        get_proof_flags(tree, leaves, proof),
        get_proof_ids(tree, leaves, proof),
    )


class TestValidProofs:

    def test_flags_accept(self, proof_case):
        tree, leaves, proof, flags, _ = proof_case
        assert verify_with_flags(tree.root, leaves, proof, flags) is True

    def test_ids_accept(self, proof_case):
        tree, leaves, proof, _, ids = proof_case
        assert verify_with_ids(tree.root, leaves, proof, ids) is True

    def test_leaf_order_and_duplicates_ignored(self, proof_case):
        tree, leaves, proof, flags, ids = proof_case
        scrambled = list(reversed(leaves)) + [leaves[0]]

        assert verify_with_flags(tree.root, scrambled, proof, flags)
        assert verify_with_ids(tree.root, scrambled, proof, ids)

    def test_accepts_bytearray(self, proof_case):
        tree, leaves, proof, flags, _ = proof_case
        assert verify_with_flags(
            bytearray(tree.root), [bytearray(l) for l in leaves], proof, flags
        )


class TestTampering:
    """Any change to leaves, proof or root is rejected."""

    def test_tampered_leaf(self, proof_case):
        tree, leaves, proof, flags, ids = proof_case
        tampered = [hash_leaf("evil")] + leaves[1:]

        assert not verify_with_flags(tree.root, tampered, proof, flags)
        assert not verify_with_ids(tree.root, tampered, proof, ids)

    def test_tampered_proof(self, proof_case):
        tree, leaves, proof, flags, ids = proof_case
        tampered = [flip_byte(proof[0], 31)] + proof[1:]

        assert not verify_with_flags(tree.root, leaves, tampered, flags)
        assert not verify_with_ids(tree.root, leaves, tampered, ids)

    def test_wrong_root(self, proof_case):
        _, leaves, proof, flags, ids = proof_case
        other = make_tree(16, prefix="other").root

        assert not verify_with_flags(other, leaves, proof, flags)
        assert not verify_with_ids(other, leaves, proof, ids)

    def test_cross_tree_proof(self):
        """A proof from one tree does not verify leaves of another."""
        first, second = make_tree(8), make_tree(8, prefix="b")
        leaves = leaves_at(first, [1, 2])
        proof = get_multi_proof(first, leaves)
        flags = get_proof_flags(first, leaves, proof)

        assert verify_with_flags(first.root, leaves, proof, flags)
        assert not verify_with_flags(second.root, leaves, proof, flags)
        assert not verify_with_flags(second.root, leaves_at(second, [1, 2]), proof, flags)

    def test_flipped_flag(self, proof_case):
        tree, leaves, proof, flags, _ = proof_case
        flipped = list(flags)
        flipped[0] = not flipped[0]

        assert not verify_with_flags(tree.root, leaves, proof, flipped)

    def test_dropped_leaf(self, proof_case):
        tree, leaves, proof, flags, ids = proof_case

        assert not verify_with_flags(tree.root, leaves[1:], proof, flags)
        assert not verify_with_ids(tree.root, leaves[1:], proof, ids)


class TestMalformedFlags:
    """Structurally broken flag inputs return False."""

    def test_empty_leaves(self, proof_case):
        tree, _, proof, flags, _ = proof_case
        assert verify_with_flags(tree.root, [], proof, flags) is False

    def test_unused_proof_element(self, proof_case):
        tree, leaves, proof, flags, _ = proof_case
        assert not verify_with_flags(tree.root, leaves, proof + [keccak256(b"x")], flags)

    def test_missing_proof_element(self, proof_case):
        tree, leaves, proof, flags, _ = proof_case
        assert not verify_with_flags(tree.root, leaves, proof[:-1], flags)

    def test_extra_flag(self, proof_case):
        tree, leaves, proof, flags, _ = proof_case
        assert not verify_with_flags(tree.root, leaves, proof, flags + [True])

    def test_truncated_flags(self, proof_case):
        tree, leaves, proof, flags, _ = proof_case
        assert not verify_with_flags(tree.root, leaves, proof, flags[:-1])

    def test_non_bool_flags(self, proof_case):
        tree, leaves, proof, flags, _ = proof_case
        assert not verify_with_flags(tree.root, leaves, proof, [int(f) for f in flags])

    @pytest.mark.parametrize("bad_root", [b"", b"\x00" * 31, "0x" + "00" * 32, None])
    def test_bad_root(self, proof_case, bad_root):
        _, leaves, proof, flags, _ = proof_case
        assert verify_with_flags(bad_root, leaves, proof, flags) is False

    def test_short_digest_in_proof(self, proof_case):
        tree, leaves, proof, flags, _ = proof_case
        assert not verify_with_flags(tree.root, leaves, [p[:16] for p in proof], flags)

    @pytest.mark.parametrize("bad", [None, 42, b"\x00" * 32, "leaves"])
    def test_non_sequence_inputs(self, proof_case, bad):
        tree, leaves, proof, flags, _ = proof_case
        assert verify_with_flags(tree.root, bad, proof, flags) is False
        assert verify_with_flags(tree.root, leaves, bad, flags) is False
        assert verify_with_flags(tree.root, leaves, proof, bad) is False


class TestMalformedIds:
    """Structurally broken id inputs return False."""

    def test_odd_length(self, proof_case):
        tree, leaves, proof, _, ids = proof_case
        assert not verify_with_ids(tree.root, leaves, proof, ids[:-1])

    def test_out_of_range(self, proof_case):
        tree, leaves, proof, _, ids = proof_case
        bad = list(ids)
        bad[-1] = 10_000
        assert not verify_with_ids(tree.root, leaves, proof, bad)

    def test_negative_index(self, proof_case):
        tree, leaves, proof, _, ids = proof_case
        bad = list(ids)
        bad[0] = -1
        assert not verify_with_ids(tree.root, leaves, proof, bad)

    def test_self_pair(self, proof_case):
        tree, leaves, proof, _, ids = proof_case
        bad = list(ids)
        bad[1] = bad[0]
        assert not verify_with_ids(tree.root, leaves, proof, bad)

    def test_reused_entry(self):
        """Combining a leaf twice cannot fake coverage of a missing sibling."""
        tree = make_tree(2)
        a = tree.leaves[0]
        # [a, b] with ids (0, 1) then (0, 2) would reuse a
        assert not verify_with_ids(tree.root, [a], [tree.leaves[1]], [0, 1, 0, 2])

    def test_unused_proof_element(self, proof_case):
        tree, leaves, proof, _, ids = proof_case
        extra = [keccak256(b"x")] + proof
        shifted = [i + 1 for i in ids]
        assert not verify_with_ids(tree.root, leaves, extra, shifted)

    def test_bool_ids_rejected(self):
        tree = make_tree(2)
        assert not verify_with_ids(tree.root, tree.leaves, [], [False, True])

    def test_no_ids_multiple_leaves(self, proof_case):
        tree, leaves, proof, _, _ = proof_case
        assert not verify_with_ids(tree.root, leaves, proof, [])

    def test_single_leaf_is_root(self):
        tree = make_tree(1)
        assert verify_with_ids(tree.root, tree.leaves, [], [])
        assert not verify_with_ids(tree.root, [hash_leaf("x")], [], [])


class _ExplodingIterable:
    """Iterable whose iteration fails with a non-TypeError exception."""

    def __iter__(self):
        raise ValueError("broken iterator")


class TestHostileIterables:
    """Inputs that blow up while being read still yield False."""

    def test_flags_verifier(self, proof_case):
        tree, leaves, proof, flags, _ = proof_case
        assert verify_with_flags(tree.root, _ExplodingIterable(), proof, flags) is False
        assert verify_with_flags(tree.root, leaves, _ExplodingIterable(), flags) is False
        assert verify_with_flags(tree.root, leaves, proof, _ExplodingIterable()) is False

    def test_ids_verifier(self, proof_case):
        tree, leaves, proof, _, ids = proof_case
        assert verify_with_ids(tree.root, _ExplodingIterable(), proof, ids) is False
        assert verify_with_ids(tree.root, leaves, _ExplodingIterable(), ids) is False
        assert verify_with_ids(tree.root, leaves, proof, _ExplodingIterable()) is False
