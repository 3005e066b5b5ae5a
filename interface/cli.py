import argparse

import chess

from chessbot.config import CONFIG, Difficulty
from chessbot.core.utils import setup_logging
from chessbot.main import Engine


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play a game against the engine.")
    parser.add_argument("--difficulty", choices=[d.value for d in Difficulty],
                        default=CONFIG.search.difficulty)
    parser.add_argument("--color", choices=["white", "black"], default="white",
                        help="side the human plays")
    parser.add_argument("--fen", default=None, help="start from this position")
    parser.add_argument("--seed", type=int, default=None)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(CONFIG.log_level)

    engine = Engine(difficulty=args.difficulty, seed=args.seed)
    if args.fen:
        engine.board.set_fen(args.fen)
    human = chess.WHITE if args.color == "white" else chess.BLACK

    while not engine.board.is_game_over():
        engine.print_board()
        print("----------------------------")

        if engine.board.side_to_move() == human:
            user_move = input("Enter your move (uci format, e2e4): ").strip()
            if user_move in ("quit", "exit"):
                return
            if not engine.make_move(user_move):
                print("Illegal move, try again.")
                continue
        else:
            move = engine.play_engine_move()
            if move is None:
                break
            print(f"Engine plays: {move} | Opening: {engine.opening_name()}")

    engine.print_board()
    print("Game Over")
    print(f"Result: {engine.board.board.result(claim_draw=True)}")


if __name__ == "__main__":
    main()
