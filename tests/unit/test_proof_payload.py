"""
Proof Payload Unit Tests
Tests for core/schemas/proof.py and core/merkle/merkle_proofs.py
"""
import pytest
from pydantic import ValidationError

from core.crypto.hashing import sha256
from core.merkle.merkle_proofs import MerkleProver, MerkleVerifier
from core.merkle.merkle_tree import build_tree
from core.schemas.errors import (
    EmptyInputError,
    MultiproofError,
    ProofShapeError,
    UnknownLeafError,
)
from core.schemas.proof import MultiProofPayload
from fixtures import make_values, values_at


DIGEST = "0x" + "ab" * 32


class TestPayloadSchema:
    """Validation rules for the wire format."""

    def test_minimal_payload(self):
        payload = MultiProofPayload(root=DIGEST, leaves=[DIGEST], flags=[])
        assert payload.schema_version == "v1"
        assert payload.hash_algorithm == "keccak256"
        assert payload.encoding == "flags"

    def test_hex_is_lowercased(self):
        payload = MultiProofPayload(root=DIGEST.upper().replace("0X", "0x"), leaves=[DIGEST], ids=[])
        assert payload.root == DIGEST

    def test_requires_an_encoding(self):
        with pytest.raises(ValidationError, match="flags, ids, or both"):
            MultiProofPayload(root=DIGEST, leaves=[DIGEST])

    def test_requires_leaves(self):
        with pytest.raises(ValidationError):
            MultiProofPayload(root=DIGEST, leaves=[], flags=[])

    @pytest.mark.parametrize("bad", ["ab" * 32, "0x" + "ab" * 31, "0x" + "zz" * 32])
    def test_rejects_bad_digest(self, bad):
        with pytest.raises(ValidationError):
            MultiProofPayload(root=bad, leaves=[DIGEST], flags=[])
        with pytest.raises(ValidationError):
            MultiProofPayload(root=DIGEST, leaves=[DIGEST], proof=[bad], flags=[])

    def test_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            MultiProofPayload(root=DIGEST, leaves=[DIGEST], flags=[], extra="x")

    def test_rejects_unknown_schema_version(self):
        with pytest.raises(ValidationError, match="Unsupported schema version"):
            MultiProofPayload(schema_version="v9", root=DIGEST, leaves=[DIGEST], flags=[])

    def test_frozen(self):
        payload = MultiProofPayload(root=DIGEST, leaves=[DIGEST], flags=[])
        with pytest.raises(ValidationError):
            payload.root = DIGEST

    def test_byte_accessors(self):
        payload = MultiProofPayload(root=DIGEST, leaves=[DIGEST], proof=[DIGEST], ids=[])
        assert payload.root_bytes() == b"\xab" * 32
        assert payload.leaf_bytes() == [b"\xab" * 32]
        assert payload.proof_bytes() == [b"\xab" * 32]
        assert payload.encoding == "ids"


class TestProver:
    """Tests for MerkleProver payload generation."""

    def test_flags_payload_verifies(self):
        prover = MerkleProver.from_values(make_values(16))
        payload = prover.prove_many(["1", "4", "5", "16"])

        assert payload.flags is not None
        assert payload.ids is None
        assert payload.root == "0x" + prover.root.hex()
        assert MerkleVerifier.verify_payload(payload)

    def test_both_encodings(self):
        prover = MerkleProver.from_values(make_values(16))
        payload = prover.prove_many(["2", "9"], encoding="both")

        assert payload.encoding == "both"
        assert MerkleVerifier.verify_payload(payload)

    def test_expand_pairs(self):
        prover = MerkleProver.from_values(make_values(16))
        plain = prover.prove_many(["1", "4", "5", "16"])
        paired = prover.prove_many(["1", "4", "5", "16"], expand_pairs=True)

        assert len(paired.leaves) >= len(plain.leaves)
        assert len(paired.proof) <= len(plain.proof)
        assert MerkleVerifier.verify_payload(paired)

    def test_json_round_trip(self):
        payload = MerkleProver.from_values(make_values(10)).prove_many(["3", "7"], encoding="ids")
        restored = MultiProofPayload.model_validate_json(payload.model_dump_json())

        assert restored == payload
        assert MerkleVerifier.verify_payload(restored)

    def test_sha256_payload(self):
        prover = MerkleProver.from_values(make_values(6), hasher=sha256)
        payload = prover.prove_many(["1", "6"], encoding="ids")

        assert payload.hash_algorithm == "sha256"
        assert MerkleVerifier.verify_payload(payload)

    def test_out_of_order_shape_needs_ids(self):
        values = make_values(5)
        tree = build_tree(values)
        requested = values_at(tree, values, [0, 4])
        prover = MerkleProver(tree)

        with pytest.raises(ProofShapeError):
            prover.prove_many(requested, encoding="flags")
        with pytest.raises(ProofShapeError):
            prover.prove_many(requested, encoding="both")

        assert MerkleVerifier.verify_payload(prover.prove_many(requested, encoding="ids"))

    def test_unknown_value(self):
        with pytest.raises(UnknownLeafError) as exc_info:
            MerkleProver.from_values(make_values(4)).prove_many(["nope"])

        error = exc_info.value.to_error_model()
        assert isinstance(error, MultiproofError)
        assert error.code == "UNKNOWN_LEAF"

    def test_nothing_requested(self):
        with pytest.raises(EmptyInputError):
            MerkleProver.from_values(make_values(4)).prove_many([])

    def test_single_proof(self):
        prover = MerkleProver.from_values(["a", "b", "c"])
        assert MerkleVerifier.verify(prover.prove("c"))


class TestVerifierPayloads:
    """verify_payload never raises."""

    def test_wrong_root(self):
        payload = MerkleProver.from_values(make_values(8)).prove_many(["1", "2"])
        forged = payload.model_copy(update={"root": DIGEST})

        assert MerkleVerifier.verify_payload(forged) is False

    def test_unsupported_hash(self):
        payload = MerkleProver.from_values(make_values(8)).prove_many(["1", "2"])
        forged = payload.model_copy(update={"hash_algorithm": "md5"})

        assert MerkleVerifier.verify_payload(forged) is False

    def test_one_bad_encoding_fails_payload(self):
        payload = MerkleProver.from_values(make_values(8)).prove_many(["1", "2"], encoding="both")
        forged = payload.model_copy(update={"ids": list(reversed(payload.ids))})

        assert MerkleVerifier.verify_payload(forged) is False
