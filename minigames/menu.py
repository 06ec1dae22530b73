import pygame

from minigames import config
from minigames.games import GAMES
from minigames.leaderboard import get_leaderboard
from minigames.play import play


class MainMenu:
    """Keyboard driven menu with a main, a games and a highscores screen."""

    MAIN_ITEMS = ["MINI GAMES", "HIGHSCORES", "EXIT GAME"]

    UP_KEYS = (pygame.K_UP, pygame.K_w)
    DOWN_KEYS = (pygame.K_DOWN, pygame.K_s)
    ACTIVATE_KEYS = (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE)

    def __init__(self, leaderboard=None, games=None):
        self.leaderboard = leaderboard if leaderboard is not None else get_leaderboard()
        self.games = list(games if games is not None else GAMES)
        self.screen_name = "main"
        self.selected = 0

        pygame.font.init()
        self.font_title = pygame.font.Font(None, 84)
        self.font_item = pygame.font.Font(None, 44)
        self.font_small = pygame.font.Font(None, 30)

    def items(self):
        if self.screen_name == "games":
            return [name.upper() for name in self.games] + ["BACK TO MAIN MENU"]
        if self.screen_name == "highscores":
            return [f"RESET {name.upper()}" for name in self.games] + ["RESET ALL", "BACK TO MAIN MENU"]
        return list(self.MAIN_ITEMS)

    def show(self, screen_name):
        self.screen_name = screen_name
        self.selected = 0

    def handle_key(self, key):
        """Update the menu for a key press.

        Returns ``("play", game_name)``, ``("exit", None)`` or None.
        """
        count = len(self.items())
        if key in self.UP_KEYS:
            self.selected = (self.selected - 1) % count
        elif key in self.DOWN_KEYS:
            self.selected = (self.selected + 1) % count
        elif key in self.ACTIVATE_KEYS:
            return self._activate()
        elif key == pygame.K_ESCAPE:
            if self.screen_name == "main":
                return ("exit", None)
            self.show("main")
        return None

    def _activate(self):
        index = self.selected
        if self.screen_name == "main":
            if index == 0:
                self.show("games")
            elif index == 1:
                self.show("highscores")
            else:
                return ("exit", None)
        elif self.screen_name == "games":
            if index < len(self.games):
                return ("play", self.games[index])
            self.show("main")
        else:
            if index < len(self.games):
                self.leaderboard.reset_highscore(self.games[index])
            elif index == len(self.games):
                self.leaderboard.reset_all_highscores()
            else:
                self.show("main")
        return None

    def render(self, surface):
        width, height = surface.get_size()
        self._render_background(surface)

        titles = {"main": "GAME COLLECTION", "games": "SELECT A GAME", "highscores": "HIGHSCORES"}
        title = self.font_title.render(titles[self.screen_name], True, config.TEXT_COLOR)
        surface.blit(title, title.get_rect(center=(width / 2, 80)))

        y = 170
        if self.screen_name == "highscores":
            for name in self.games:
                line = f"{name}: {self.leaderboard.get_highscore_display(name)}"
                text = self.font_small.render(line, True, config.GOLD_COLOR)
                surface.blit(text, text.get_rect(center=(width / 2, y)))
                y += 36
            y += 20

        for i, item in enumerate(self.items()):
            selected = i == self.selected
            rect = pygame.Rect(0, 0, 420, 50)
            rect.center = (width // 2, y)
            color = config.SECONDARY_COLOR if selected else config.PRIMARY_COLOR
            pygame.draw.rect(surface, color, rect, border_radius=12)
            if selected:
                pygame.draw.rect(surface, config.TEXT_COLOR, rect, 3, border_radius=12)
            text = self.font_item.render(item, True, config.TEXT_COLOR)
            surface.blit(text, text.get_rect(center=rect.center))
            y += 65

        version = self.font_small.render(config.VERSION, True, (200, 200, 200))
        surface.blit(version, version.get_rect(bottomright=(width - 20, height - 10)))

    def _render_background(self, surface):
        width, height = surface.get_size()
        for y in range(height):
            t = y / max(height - 1, 1)
            color = tuple(
                int(top + (bottom - top) * t)
                for top, bottom in zip(config.BG_TOP, config.BG_BOTTOM)
            )
            pygame.draw.line(surface, color, (0, y), (width, y))


def run(player_name=None, leaderboard=None):
    """Show the menu window until the player exits."""
    pygame.init()
    if leaderboard is None:
        leaderboard = get_leaderboard()
    menu = MainMenu(leaderboard)

    def open_window():
        window = pygame.display.set_mode((config.MENU_WIDTH, config.MENU_HEIGHT))
        pygame.display.set_caption("Game Collection")
        return window

    screen = open_window()
    clock = pygame.time.Clock()
    running = True

    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                command = menu.handle_key(event.key)
                if command is None:
                    continue
                kind, game_name = command
                if kind == "exit":
                    running = False
                elif kind == "play":
                    print(f"Launching {game_name}...")
                    play(game_name, player_name, leaderboard)
                    screen = open_window()

        menu.render(screen)
        pygame.display.flip()
        clock.tick(config.MENU_FPS)

    pygame.quit()
