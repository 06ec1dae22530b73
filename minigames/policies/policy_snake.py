def policy(env):
    # Strategy: Look one cell ahead in every direction the snake may turn to.
    # Drop moves that leave the grid or hit the body (the tail cell counts as free, it moves away).
    # Among the safe moves pick the one with the smallest Manhattan distance to the food.
    head_x, head_y = env.snake_body[0]
    body = set(env.snake_body[:-1])
    target = env.food_pos

    best_movement, best_dist = 0, None
    for movement, (dx, dy) in env.DIRECTIONS.items():
        if (dx + env.direction[0], dy + env.direction[1]) == (0, 0):
            continue  # Can't reverse
        nx, ny = head_x + dx, head_y + dy
        if not (0 <= nx < env.GRID_WIDTH and 0 <= ny < env.GRID_HEIGHT):
            continue
        if (nx, ny) in body:
            continue
        dist = 0 if target is None else abs(nx - target[0]) + abs(ny - target[1])
        if best_dist is None or dist < best_dist:
            best_movement, best_dist = movement, dist
    return [best_movement, 0, 0]
