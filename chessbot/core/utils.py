import logging


def setup_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def format_info(depth, score, nodes, elapsed, best_move, seldepth, MATE_SCORE):
    nps = int(nodes / elapsed) if elapsed > 0 else 0
    move_str = best_move.uci if best_move else "-"

    if score is not None and abs(score) >= MATE_SCORE:
        score_str = "mate" if score > 0 else "mated"
    else:
        score_str = f"cp {score}"

    return (f"info depth {depth} seldepth {depth + seldepth} score {score_str} "
            f"nodes {nodes} nps {nps} time {int(elapsed * 1000)} bestmove {move_str}")
