"""
Proof Verification Unit Tests
Tests for verify_proof_detailed, SparseMerkleProver/SparseMerkleVerifier
and the ProofEnvelope schema.

Tests:
- Detailed results separate malformed proofs from root mismatches
- require_valid raises the matching exception
- Envelopes survive JSON and verify under the verifier's own parameters
"""
import pytest
from pydantic import ValidationError

from core.config.runtime import TreeConfig
from core.crypto.hashing import blake2s, sha256
from core.merkle.merkle_proofs import SparseMerkleProver, SparseMerkleVerifier
from core.merkle.sparse_merkle_tree import verify_proof_detailed
from core.schemas.errors import (
    ErrorCodes,
    MalformedProofException,
    TreeConstructionException,
    VerificationMismatchException,
)
from core.schemas.proof import ProofEnvelope
from core.schemas.verification import CheckResult
from fixtures.smt_fixtures import SCENARIO_A_PROOF_303_HEX, SCENARIO_A_ROOT_HEX


class TestVerifyProofDetailed:
    """Tests for verify_proof_detailed()."""

    def test_success(self, scenario_a_tree):
        proof = scenario_a_tree.generate_proof(303)
        result = verify_proof_detailed(64, sha256, 303, b"tx3", scenario_a_tree.root, proof)

        assert result.ok
        assert result.error is None
        assert result.computed_root == SCENARIO_A_ROOT_HEX
        assert [c.check_id for c in result.checks] == [
            "index_in_range",
            "proof_decodes",
            "root_matches",
        ]
        assert result.get_failed_checks() == []

    def test_root_mismatch(self, scenario_a_tree, assert_check_failed):
        proof = scenario_a_tree.generate_proof(303)
        result = verify_proof_detailed(64, sha256, 303, b"tx9", scenario_a_tree.root, proof)

        assert not result.ok
        assert result.is_mismatch
        assert not result.is_malformed
        assert result.error.code == ErrorCodes.ROOT_MISMATCH
        assert result.computed_root is not None
        assert result.computed_root != SCENARIO_A_ROOT_HEX
        assert_check_failed(result, "root_matches")

    def test_malformed(self, scenario_a_tree, assert_check_failed):
        proof = scenario_a_tree.generate_proof(303)[:-1]
        result = verify_proof_detailed(64, sha256, 303, b"tx3", scenario_a_tree.root, proof)

        assert not result.ok
        assert result.is_malformed
        assert result.computed_root is None
        assert result.error.details["proof_length"] == len(proof)
        assert_check_failed(result, "proof_decodes")

    def test_oversized_proof_is_malformed(self, scenario_a_tree):
        result = verify_proof_detailed(
            64, sha256, 303, b"tx3", scenario_a_tree.root, bytes(8 + 32 * 65)
        )
        assert result.is_malformed

    def test_index_out_of_range(self, scenario_a_tree, assert_check_failed):
        proof = scenario_a_tree.generate_proof(303)
        result = verify_proof_detailed(64, sha256, 1 << 64, b"tx3", scenario_a_tree.root, proof)

        assert not result.ok
        assert result.error.code == ErrorCodes.INDEX_OUT_OF_RANGE
        assert_check_failed(result, "index_in_range")

    def test_invalid_depth_raises(self):
        with pytest.raises(TreeConstructionException):
            verify_proof_detailed(0, sha256, 0, b"", bytes(32), bytes(8))

    def test_wrong_default_table_rejected(self):
        with pytest.raises(ValueError, match="default_nodes"):
            verify_proof_detailed(8, sha256, 0, b"", bytes(32), bytes(8), default_nodes=[bytes(32)])

    def test_result_serializes(self, scenario_a_tree):
        proof = scenario_a_tree.generate_proof(303)
        result = verify_proof_detailed(64, sha256, 303, b"tx9", scenario_a_tree.root, proof)
        dumped = result.model_dump()
        assert dumped["ok"] is False
        assert dumped["error"]["code"] == ErrorCodes.ROOT_MISMATCH


class TestCheckResult:
    """Tests for CheckResult severities."""

    def test_factories_set_severity(self):
        assert CheckResult.passed("root_matches").severity == "info"
        failed = CheckResult.failed("root_matches", "Root mismatch")
        assert failed.severity == "error"
        assert not failed.ok

    def test_unknown_severity_rejected(self):
        with pytest.raises(ValidationError):
            CheckResult(check_id="x", ok=False, severity="warn", message="m")


class TestSparseMerkleVerifier:
    """Tests for SparseMerkleVerifier."""

    def test_verify_golden_proof(self):
        verifier = SparseMerkleVerifier(depth=64)
        assert verifier.verify(
            303,
            b"tx3",
            bytes.fromhex(SCENARIO_A_ROOT_HEX),
            bytes.fromhex(SCENARIO_A_PROOF_303_HEX),
        )

    def test_default_table_held(self):
        verifier = SparseMerkleVerifier(depth=16)
        assert len(verifier.default_nodes) == 17

    def test_from_config(self):
        verifier = SparseMerkleVerifier.from_config(TreeConfig(depth=16, hash_algorithm="blake2s"))
        assert verifier.depth == 16
        assert verifier.hash_fn is blake2s

    def test_invalid_depth(self):
        with pytest.raises(TreeConstructionException):
            SparseMerkleVerifier(depth=65)

    def test_require_valid_passes(self, scenario_a_tree):
        proof = scenario_a_tree.generate_proof(201)
        SparseMerkleVerifier().require_valid(201, b"tx2", scenario_a_tree.root, proof)

    def test_require_valid_mismatch(self, scenario_a_tree):
        proof = scenario_a_tree.generate_proof(201)
        with pytest.raises(VerificationMismatchException) as exc_info:
            SparseMerkleVerifier().require_valid(201, b"tx1", scenario_a_tree.root, proof)
        assert exc_info.value.code == ErrorCodes.ROOT_MISMATCH
        assert exc_info.value.details["index"] == 201

    def test_require_valid_malformed(self, scenario_a_tree):
        with pytest.raises(MalformedProofException):
            SparseMerkleVerifier().require_valid(201, b"tx2", scenario_a_tree.root, b"\x00")


class TestSparseMerkleProver:
    """Tests for SparseMerkleProver."""

    def test_prove_static(self, scenario_a_leaves):
        proof = SparseMerkleProver.prove(scenario_a_leaves, 303)
        assert proof.hex() == SCENARIO_A_PROOF_303_HEX

    def test_compute_root_static(self, scenario_a_leaves):
        assert SparseMerkleProver.compute_root(scenario_a_leaves).hex() == SCENARIO_A_ROOT_HEX

    def test_default_config(self, scenario_a_leaves):
        prover = SparseMerkleProver(scenario_a_leaves)
        assert prover.tree.depth == 64
        assert prover.tree.root_hex() == SCENARIO_A_ROOT_HEX

    def test_prove_envelope_member(self, scenario_a_leaves):
        envelope = SparseMerkleProver(scenario_a_leaves).prove_envelope(303)
        assert envelope.depth == 64
        assert envelope.hash_algorithm == "sha256"
        assert envelope.index == 303
        assert envelope.leaf == b"tx3".hex()
        assert envelope.root == SCENARIO_A_ROOT_HEX
        assert envelope.proof == SCENARIO_A_PROOF_303_HEX

    def test_prove_envelope_non_member_verifies(self, scenario_a_leaves):
        """An absent index gets the level-0 default node as its leaf and verifies."""
        prover = SparseMerkleProver(scenario_a_leaves)
        envelope = prover.prove_envelope(302)
        assert envelope.leaf_bytes == prover.tree.default_nodes[0]

        result = SparseMerkleVerifier().verify_envelope(envelope)
        assert result.ok
        assert result.computed_root == SCENARIO_A_ROOT_HEX

    def test_prove_envelope_empty_tree_verifies(self):
        prover = SparseMerkleProver({}, TreeConfig(depth=16))
        envelope = prover.prove_envelope(9)
        assert envelope.proof_bytes == bytes(32)
        assert envelope.leaf_bytes == prover.tree.default_nodes[0]
        assert SparseMerkleVerifier(depth=16).verify_envelope(envelope).ok

    def test_prove_envelope_absent_index_among_hashed_leaves(self, random_leaves):
        prover = SparseMerkleProver(random_leaves, TreeConfig(depth=16, hash_algorithm="blake2s"))
        absent = next(i for i in range(1 << 16) if i not in random_leaves)
        envelope = prover.prove_envelope(absent)

        verifier = SparseMerkleVerifier(depth=16, hash_fn=blake2s)
        assert verifier.verify_envelope(envelope).ok
        forged = envelope.model_copy(update={"leaf": "00" * 32})
        assert not verifier.verify_envelope(forged).ok


class TestProofEnvelope:
    """Tests for the ProofEnvelope schema."""

    def test_json_round_trip_verifies(self, scenario_a_leaves):
        prover = SparseMerkleProver(scenario_a_leaves, TreeConfig(depth=32))
        envelope = prover.prove_envelope(407)
        restored = ProofEnvelope.model_validate_json(envelope.model_dump_json())

        assert restored == envelope
        result = SparseMerkleVerifier(depth=32).verify_envelope(restored)
        assert result.ok

    def test_hex_normalized(self):
        envelope = ProofEnvelope(
            depth=8,
            index=1,
            leaf="0xABCD",
            root="AA" * 32,
            proof="0x" + "00" * 8,
        )
        assert envelope.leaf == "abcd"
        assert envelope.root == "aa" * 32
        assert envelope.proof == "00" * 8

    def test_short_root_rejected(self):
        with pytest.raises(ValidationError):
            ProofEnvelope(depth=8, index=1, root="aa" * 31, proof="00" * 8)

    def test_bad_hex_rejected(self):
        with pytest.raises(ValidationError):
            ProofEnvelope(depth=8, index=1, root="aa" * 32, proof="zz")

    def test_negative_index_rejected(self):
        with pytest.raises(ValidationError):
            ProofEnvelope(depth=8, index=-1, root="aa" * 32, proof="00" * 8)

    def test_extra_field_rejected(self):
        with pytest.raises(ValidationError):
            ProofEnvelope(depth=8, index=1, root="aa" * 32, proof="00" * 8, note="x")

    def test_verify_envelope_uses_verifier_depth(self, scenario_a_leaves):
        """An envelope claiming another depth is still checked at the verifier's depth."""
        envelope = SparseMerkleProver(scenario_a_leaves).prove_envelope(303)
        relabeled = envelope.model_copy(update={"depth": 32})

        assert SparseMerkleVerifier(depth=64).verify_envelope(relabeled).ok
        assert not SparseMerkleVerifier(depth=32).verify_envelope(envelope).ok


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
