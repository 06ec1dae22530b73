"""Entry point for the game collection.

    python -m minigames                    open the main menu
    python -m minigames <game> [player]    play one game directly
    python -m minigames scores [game]      print the leaderboard
    python -m minigames demo <game>        watch the scripted policy play

Game names ignore case and spaces, so "Flappy Bird" can be given quoted
or as flappybird.
"""

import os
import sys


def main(argv=None):
    """Main entry point."""
    if argv is None:
        argv = sys.argv[1:]

    # A real window is wanted here; must be set before any game module is imported
    os.environ.setdefault("MINIGAMES_HEADLESS", "0")

    from minigames.games import GAMES, get_game_class
    from minigames.leaderboard import get_leaderboard

    leaderboard = get_leaderboard()

    if not argv:
        from minigames.menu import run

        run(leaderboard=leaderboard)
        return 0

    if argv[0] == "scores":
        if len(argv) == 1:
            leaderboard.print_scores()
            return 0
        try:
            game_class = get_game_class(argv[1])
        except KeyError:
            print(f"Unknown game '{argv[1]}'. Available games: {', '.join(GAMES)}")
            return 1
        leaderboard.print_scores(game_class.game_name)
        return 0

    watch = argv[0] == "demo"
    if watch:
        argv = argv[1:]
        if not argv:
            print(f"Usage: python -m minigames demo <game>. Available games: {', '.join(GAMES)}")
            return 1

    try:
        game_class = get_game_class(argv[0])
    except KeyError:
        print(f"Unknown game '{argv[0]}'. Available games: {', '.join(GAMES)}")
        return 1

    from minigames.play import demo, play

    if watch:
        demo(game_class.game_name)
        return 0

    player_name = argv[1] if len(argv) > 1 else None
    print(f"Starting {game_class.game_name}")
    score = play(game_class.game_name, player_name, leaderboard)
    print(f"Final score: {score}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
