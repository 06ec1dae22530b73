# Distance kept between the bird's bottom edge and the lower pipe
GAP_MARGIN = 35


def policy(env):
    # Strategy: Keep the bird's bottom edge just above the lower pipe of the next gap (or mid screen).
    # Flap when the bird sinks below that line and is not already climbing; a flap lifts it ~105 px.
    # Space must be released between flaps, so a held press is always let go on the next step.
    if env.prev_space_held:
        return [0, 0, 0]
    if not env.started:
        return [0, 1, 0]

    pipe = env.next_pipe()
    if pipe is None:
        target_y = env.SCREEN_HEIGHT / 2
    else:
        target_y = pipe['bottom'].top - GAP_MARGIN

    if env.bird.bottom > target_y and env.bird_velocity >= 0:
        return [0, 1, 0]
    return [0, 0, 0]
