import random
import unittest

from punto_core.board import Board
from punto_core.deal import POOL_SIZE, build_pool, distribute
from punto_core.player import Player
from punto_core.tokens import Color, Token

from tests.helpers import pair_counts


class TestTokenAndPlayer(unittest.TestCase):
    def test_given_bad_attributes_when_creating_token_then_value_error(self):
        with self.assertRaises(ValueError):
            Token(Color.RED, 0)
        with self.assertRaises(ValueError):
            Token(Color.RED, 10)
        with self.assertRaises(ValueError):
            Token("purple", 3)

    def test_given_token_when_placed_twice_then_runtime_error(self):
        owner = Player("Ann")
        t = Token(Color.BLUE, 4)
        self.assertFalse(t.is_placed)
        self.assertIsNone(t.coord)
        t.place(1, -2, 3, 1, owner)
        self.assertEqual(t.coord, (1, -2))
        self.assertEqual((t.x, t.y), (1, -2))
        self.assertEqual(t.placed_turn, 3)
        self.assertEqual(t.placed_order, 1)
        self.assertIs(t.owner, owner)
        self.assertEqual(t.label(), "B4")
        with self.assertRaises(RuntimeError):
            t.place(0, 0, 4, 0, owner)

    def test_given_player_with_token_in_hand_when_drawing_again_then_runtime_error(self):
        p = Player("Bob")
        p.fill_pile([Token(Color.RED, 1), Token(Color.RED, 2)], random.Random(1))
        first = p.draw()
        self.assertIsNotNone(first)
        self.assertNotIn(first, p.draw_pile)
        with self.assertRaises(RuntimeError):
            p.draw()
        p.release_hand()
        self.assertIsNotNone(p.draw())
        p.release_hand()
        self.assertIsNone(p.draw())  # pile exhausted

    def test_given_player_when_reset_then_first_player_count_survives(self):
        p = Player("Cid")
        p.fill_pile([Token(Color.RED, 1)], random.Random(0))
        p.draw()
        p.add_points(2)
        p.has_turn = True
        p.colors = [Color.RED]
        p.first_player_count = 3
        p.reset()
        self.assertEqual(p.draw_pile, [])
        self.assertIsNone(p.hand)
        self.assertEqual(p.score, 0)
        self.assertFalse(p.has_turn)
        self.assertEqual(p.colors, [])
        self.assertEqual(p.first_player_count, 3)


class TestDistribution(unittest.TestCase):
    def test_given_pool_when_built_then_72_tokens_two_per_pair(self):
        pool = build_pool()
        tokens = [t for ts in pool.values() for t in ts]
        self.assertEqual(len(tokens), POOL_SIZE)
        self.assertEqual(POOL_SIZE, 72)
        pairs = {}
        for t in tokens:
            pairs[(t.color, t.value)] = pairs.get((t.color, t.value), 0) + 1
        self.assertEqual(len(pairs), 36)
        self.assertTrue(all(v == 2 for v in pairs.values()))

    def test_given_two_players_when_distributing_then_two_colors_each(self):
        players = [Player("A"), Player("B")]
        distribute(players, random.Random(5))
        for p in players:
            self.assertEqual(len(p.colors), 2)
            self.assertEqual(len(p.draw_pile), 36)
            self.assertEqual({t.color for t in p.draw_pile}, set(p.colors))
        self.assertFalse(set(players[0].colors) & set(players[1].colors))

    def test_given_three_players_when_distributing_then_own_color_plus_six_shared(self):
        players = [Player("A"), Player("B"), Player("C")]
        distribute(players, random.Random(9))
        own = {c for p in players for c in p.colors}
        self.assertEqual(len(own), 3)
        leftover = (set(Color) - own).pop()
        shared_total = 0
        for p in players:
            self.assertEqual(len(p.colors), 1)
            self.assertEqual(len(p.draw_pile), 24)
            self.assertEqual(sum(1 for t in p.draw_pile if t.color == p.colors[0]), 18)
            shared = sum(1 for t in p.draw_pile if t.color == leftover)
            self.assertEqual(shared, 6)
            shared_total += shared
        self.assertEqual(shared_total, 18)

    def test_given_four_players_when_distributing_then_one_color_each(self):
        players = [Player(n) for n in "ABCD"]
        distribute(players, random.Random(2))
        self.assertEqual({p.colors[0] for p in players}, set(Color))
        for p in players:
            self.assertEqual(len(p.draw_pile), 18)

    def test_given_invalid_player_count_when_distributing_or_building_board_then_value_error(self):
        with self.assertRaises(ValueError):
            distribute([Player("A")], random.Random(0))
        with self.assertRaises(ValueError):
            Board(["A"])
        with self.assertRaises(ValueError):
            Board(["A", "B", "C", "D", "E"])

    def test_given_each_player_count_when_board_built_then_every_pair_twice(self):
        for count in (2, 3, 4):
            board = Board([f"P{i}" for i in range(count)], seed=count)
            self.assertEqual(board.token_count(), 72)
            counts = pair_counts(board)
            self.assertEqual(len(counts), 36)
            self.assertTrue(all(v == 2 for v in counts.values()))

    def test_given_same_seed_when_building_boards_then_same_deal(self):
        b1 = Board(["A", "B", "C"], seed=42)
        b2 = Board(["A", "B", "C"], seed=42)
        for p1, p2 in zip(b1.players, b2.players):
            self.assertEqual(
                [(t.color, t.value) for t in p1.draw_pile],
                [(t.color, t.value) for t in p2.draw_pile],
            )
        self.assertEqual(b1.players.index(b1.opener), b2.players.index(b2.opener))


if __name__ == '__main__':
    unittest.main(verbosity=2)
