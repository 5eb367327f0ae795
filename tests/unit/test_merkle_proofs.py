"""
Merkle Proof Unit Tests
Tests for core/merkle/merkle_proofs.py

Covers:
1. Proof completeness - every leaf of every tree verifies
2. Proof soundness - tampered leaves, siblings, orientations and roots fail
3. Odd-tail proofs - self-paired levels are skipped by the generator
   and reproduced by the verifier
4. Index validation - out-of-range indices raise IndexOutOfRangeException
5. Hash-operation counting on the verify side
"""
import pytest

from core.crypto.hashing import sha256
from core.merkle.merkle_proofs import (
    InclusionProof,
    MerkleProver,
    MerkleVerifier,
    Orientation,
    ProofStep,
    VerificationOutcome,
    generate_proof,
    verify_proof,
)
from core.merkle.merkle_tree import build_merkle_tree, compute_tree_depth, merkle_parent
from core.schemas.errors import (
    ErrorCodes,
    IndexOutOfRangeException,
    MerkleException,
    MerkleVerificationException,
)
from fixtures import flip_byte, make_leaves, make_raw_leaves, make_tree


class TestOrientation:
    """Tests for the explicit orientation tag."""

    def test_even_index_sibling_on_right(self):
        assert Orientation.for_index(0) is Orientation.SIBLING_ON_RIGHT
        assert Orientation.for_index(42) is Orientation.SIBLING_ON_RIGHT

    def test_odd_index_sibling_on_left(self):
        assert Orientation.for_index(1) is Orientation.SIBLING_ON_LEFT
        assert Orientation.for_index(43) is Orientation.SIBLING_ON_LEFT

    def test_is_right_flag(self):
        assert Orientation.SIBLING_ON_RIGHT.is_right is True
        assert Orientation.SIBLING_ON_LEFT.is_right is False

    def test_from_flag(self):
        assert Orientation.from_flag(True) is Orientation.SIBLING_ON_RIGHT
        assert Orientation.from_flag(False) is Orientation.SIBLING_ON_LEFT

    def test_combine_sibling_on_right_puts_current_left(self):
        current = sha256(b"current")
        sibling = sha256(b"sibling")
        step = ProofStep(sibling=sibling, orientation=Orientation.SIBLING_ON_RIGHT)

        assert step.combine(current) == merkle_parent(current, sibling)

    def test_combine_sibling_on_left_puts_current_right(self):
        current = sha256(b"current")
        sibling = sha256(b"sibling")
        step = ProofStep(sibling=sibling, orientation=Orientation.SIBLING_ON_LEFT)

        assert step.combine(current) == merkle_parent(sibling, current)

    def test_pair_round_trip(self):
        step = ProofStep(sibling=sha256(b"s"), orientation=Orientation.SIBLING_ON_LEFT)

        assert step.as_pair() == (sha256(b"s"), False)
        assert ProofStep.from_pair(step.as_pair()) == step


class TestGenerateProof:
    """Tests for generate_proof()."""

    def test_four_leaf_proof_contents(self):
        """Proof for leaf 1 of 4 holds leaf 0 (left), then parent(2,3) (right)."""
        a, b, c, d = make_leaves(4)
        tree, _ = build_merkle_tree([a, b, c, d])

        proof = generate_proof(tree, 1)

        assert proof.leaf_index == 1
        assert proof.leaf_count == 4
        assert proof.as_pairs() == [
            (a, False),
            (merkle_parent(c, d), True),
        ]

    def test_proof_length_for_power_of_two(self):
        tree = make_tree(128)

        for index in (0, 42, 127):
            assert len(generate_proof(tree, index)) == 7

    def test_single_leaf_proof_is_empty(self):
        tree = make_tree(1)

        proof = generate_proof(tree, 0)

        assert len(proof) == 0
        assert proof.steps == ()

    def test_odd_tail_level_skipped(self, three_leaves):
        """Leaf 2 of 3 is self-paired at level 0 and gets a single step."""
        l0, l1, _ = three_leaves
        tree, _ = build_merkle_tree(three_leaves)

        proof = generate_proof(tree, 2)

        assert proof.as_pairs() == [(merkle_parent(l0, l1), False)]

    def test_tail_of_five_skips_two_levels(self):
        """Leaf 4 of 5 is self-paired at widths 5 and 3."""
        leaves = make_leaves(5)
        tree, _ = build_merkle_tree(leaves)

        proof = generate_proof(tree, 4)

        assert len(proof) == 1
        assert proof.steps[0].sibling == tree.levels[2][0]
        assert proof.steps[0].orientation is Orientation.SIBLING_ON_LEFT

    def test_proof_length_never_exceeds_height_minus_one(self):
        for count in (3, 5, 7, 11, 13):
            tree = make_tree(count)
            for index in range(count):
                assert len(generate_proof(tree, index)) <= compute_tree_depth(count) - 1

    def test_generate_is_deterministic(self):
        tree = make_tree(9)

        assert generate_proof(tree, 8) == generate_proof(tree, 8)


class TestIndexOutOfRange:
    """Tests for index validation in generate_proof()."""

    def test_index_equal_to_count(self):
        tree = make_tree(4)

        with pytest.raises(IndexOutOfRangeException) as exc_info:
            generate_proof(tree, 4)

        assert exc_info.value.leaf_index == 4
        assert exc_info.value.leaf_count == 4
        assert exc_info.value.code == ErrorCodes.INDEX_OUT_OF_RANGE

    def test_index_above_count(self):
        with pytest.raises(IndexOutOfRangeException):
            generate_proof(make_tree(4), 100)

    def test_negative_index(self):
        """Negative indices are rejected rather than wrapping around."""
        with pytest.raises(IndexOutOfRangeException):
            generate_proof(make_tree(4), -1)

    def test_is_index_error_and_merkle_exception(self):
        tree = make_tree(2)

        with pytest.raises(IndexError):
            generate_proof(tree, 2)
        with pytest.raises(MerkleException):
            generate_proof(tree, 2)

    def test_message_names_index_and_count(self):
        with pytest.raises(IndexOutOfRangeException) as exc_info:
            generate_proof(make_tree(3), 7)

        assert "7" in str(exc_info.value)
        assert "3" in str(exc_info.value)


class TestProofCompleteness:
    """Every leaf of every tree must verify against its root."""

    @pytest.mark.parametrize("count", [1, 2, 3, 4, 5, 6, 7, 8, 9, 16, 17, 31, 33])
    def test_all_indices_verify(self, count):
        tree = make_tree(count)

        for index in range(count):
            proof = generate_proof(tree, index)
            outcome = verify_proof(tree.leaf(index), proof, tree.root)
            assert outcome.matches, f"leaf {index} of {count} failed"

    def test_raw_leaves_verify(self):
        leaves = make_raw_leaves(6)
        tree, _ = build_merkle_tree(leaves)

        for index, leaf in enumerate(leaves):
            assert verify_proof(leaf, generate_proof(tree, index), tree.root)

    def test_single_leaf_verifies_with_zero_operations(self):
        tree = make_tree(1)

        outcome = verify_proof(tree.leaf(0), generate_proof(tree, 0), tree.root)

        assert outcome == VerificationOutcome(matches=True, hash_operations=0)


class TestVerifyHashOperations:
    """Tests for hash operations counted during verification."""

    def test_power_of_two_counts_steps(self):
        tree = make_tree(128)
        proof = generate_proof(tree, 42)

        outcome = verify_proof(tree.leaf(42), proof, tree.root)

        assert outcome.hash_operations == 7

    def test_self_paired_level_counts_one_operation(self, three_leaves):
        tree, _ = build_merkle_tree(three_leaves)
        proof = generate_proof(tree, 2)

        outcome = verify_proof(tree.leaf(2), proof, tree.root)

        assert outcome.matches
        assert len(proof) == 1
        assert outcome.hash_operations == 2

    def test_tail_of_five_counts_every_level(self):
        tree = make_tree(5)

        outcome = verify_proof(tree.leaf(4), generate_proof(tree, 4), tree.root)

        assert outcome.matches
        assert outcome.hash_operations == 3

    def test_failed_verification_still_counts(self):
        tree = make_tree(8)
        proof = generate_proof(tree, 3)

        outcome = verify_proof(flip_byte(tree.leaf(3)), proof, tree.root)

        assert not outcome.matches
        assert outcome.hash_operations == 3


class TestProofSoundness:
    """Tampering with any input must make verification fail."""

    def test_tampered_leaf_fails(self, seven_leaf_tree):
        proof = generate_proof(seven_leaf_tree, 2)

        assert not verify_proof(flip_byte(seven_leaf_tree.leaf(2)), proof, seven_leaf_tree.root)

    def test_wrong_leaf_fails(self, seven_leaf_tree):
        proof = generate_proof(seven_leaf_tree, 2)

        assert not verify_proof(seven_leaf_tree.leaf(3), proof, seven_leaf_tree.root)

    def test_tampered_sibling_fails(self):
        tree = make_tree(8)
        proof = generate_proof(tree, 5)
        steps = list(proof.steps)
        steps[1] = ProofStep(sibling=flip_byte(steps[1].sibling, 31), orientation=steps[1].orientation)
        tampered = InclusionProof(leaf_index=5, leaf_count=8, steps=tuple(steps))

        assert not verify_proof(tree.leaf(5), tampered, tree.root)

    def test_flipped_orientation_fails(self):
        tree = make_tree(8)
        proof = generate_proof(tree, 0)
        first = proof.steps[0]
        flipped = ProofStep(sibling=first.sibling, orientation=Orientation.SIBLING_ON_LEFT)
        tampered = InclusionProof(
            leaf_index=0, leaf_count=8, steps=(flipped,) + proof.steps[1:]
        )

        assert not verify_proof(tree.leaf(0), tampered, tree.root)

    def test_wrong_root_fails(self):
        tree = make_tree(4)
        proof = generate_proof(tree, 1)

        assert not verify_proof(tree.leaf(1), proof, flip_byte(tree.root))

    def test_root_of_wrong_length_fails(self):
        tree = make_tree(4)
        proof = generate_proof(tree, 1)

        assert not verify_proof(tree.leaf(1), proof, tree.root[:31])

    def test_missing_step_fails(self):
        tree = make_tree(8)
        proof = generate_proof(tree, 6)
        truncated = InclusionProof(leaf_index=6, leaf_count=8, steps=proof.steps[:-1])

        assert not verify_proof(tree.leaf(6), truncated, tree.root)

    def test_leftover_step_fails(self):
        tree = make_tree(4)
        proof = generate_proof(tree, 0)
        padded = InclusionProof(
            leaf_index=0, leaf_count=4, steps=proof.steps + (proof.steps[-1],)
        )

        assert not verify_proof(tree.leaf(0), padded, tree.root)

    def test_impossible_shape_fails(self):
        tree = make_tree(4)
        proof = generate_proof(tree, 3)
        shifted = InclusionProof(leaf_index=4, leaf_count=4, steps=proof.steps)

        outcome = verify_proof(tree.leaf(3), shifted, tree.root)

        assert outcome.matches is False
        assert outcome.hash_operations == 0

    def test_proof_from_other_tree_fails(self):
        tree_a = make_tree(8)
        tree_b, _ = build_merkle_tree(make_leaves(8, "other"))

        proof = generate_proof(tree_a, 2)

        assert not verify_proof(tree_a.leaf(2), proof, tree_b.root)


class TestBareStepChains:
    """A bare list of steps is applied literally, with no shape information."""

    def test_pairs_verify_for_balanced_tree(self):
        tree = make_tree(8)
        proof = generate_proof(tree, 5)

        outcome = verify_proof(tree.leaf(5), proof.as_pairs(), tree.root)

        assert outcome.matches
        assert outcome.hash_operations == 3

    def test_proof_steps_accepted(self):
        tree = make_tree(4)
        proof = generate_proof(tree, 2)

        assert verify_proof(tree.leaf(2), list(proof.steps), tree.root)

    def test_empty_chain_compares_leaf_to_root(self):
        leaf = sha256(b"only")

        assert verify_proof(leaf, [], leaf) == VerificationOutcome(True, 0)
        assert not verify_proof(leaf, [], sha256(b"other"))

    def test_chain_does_not_reproduce_self_pairing(self, three_leaves):
        """Without the tree shape the duplicated tail cannot be recomputed."""
        tree, _ = build_merkle_tree(three_leaves)
        proof = generate_proof(tree, 2)

        assert verify_proof(tree.leaf(2), proof, tree.root).matches
        assert not verify_proof(tree.leaf(2), proof.as_pairs(), tree.root).matches


class TestVerificationOutcome:
    def test_truthiness_follows_matches(self):
        assert VerificationOutcome(matches=True, hash_operations=3)
        assert not VerificationOutcome(matches=False, hash_operations=3)


class TestProverVerifierClasses:
    """Tests for MerkleProver and MerkleVerifier wrappers."""

    def test_prover_and_verifier(self):
        leaves = make_leaves(5)

        root = MerkleProver.compute_root(leaves)
        proof = MerkleProver.prove(leaves, 3)

        assert MerkleVerifier.verify(leaves[3], proof, root) is True
        assert MerkleVerifier.verify(leaves[2], proof, root) is False

    def test_verify_pairs(self):
        leaves = make_leaves(4)
        root = MerkleProver.compute_root(leaves)
        pairs = MerkleProver.prove(leaves, 0).as_pairs()

        assert MerkleVerifier.verify_pairs(leaves[0], pairs, root) is True

    def test_prover_index_out_of_range(self):
        with pytest.raises(IndexOutOfRangeException):
            MerkleProver.prove(make_leaves(3), 3)

    def test_require_returns_outcome(self):
        leaves = make_leaves(6)
        root = MerkleProver.compute_root(leaves)
        proof = MerkleProver.prove(leaves, 5)

        outcome = MerkleVerifier.require(leaves[5], proof, root)

        assert outcome.matches

    def test_require_raises_on_mismatch(self):
        leaves = make_leaves(6)
        root = MerkleProver.compute_root(leaves)
        proof = MerkleProver.prove(leaves, 5)

        with pytest.raises(MerkleVerificationException) as exc_info:
            MerkleVerifier.require(leaves[4], proof, root)

        assert exc_info.value.code == ErrorCodes.MERKLE_PROOF_INVALID
        assert exc_info.value.details["leaf_index"] == 5
