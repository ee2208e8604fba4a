import math

import pytest

from mniam.packets import ObjectState, ObjectType
from mniam.strategy import GameState


def obj(kind, no, x, y, hp=10):
    return ObjectState(object_type=int(kind), object_no=no, hp=hp, x=x, y=y)


def active_state(player_number=1):
    state = GameState()
    state.start_game(player_number, 1000.0, 800.0)
    return state


def test_start_and_end_game():
    state = GameState()
    state.start_game(3, 640.0, 480.0)
    assert state.game_active
    assert state.my_player_number == 3
    assert (state.map_width, state.map_height) == (640.0, 480.0)
    state.end_game()
    assert not state.game_active


def test_update_adds_new_objects_in_order():
    state = GameState()
    a = obj(ObjectType.FOOD, 1, 1.0, 2.0)
    b = obj(ObjectType.PLAYER, 1, 3.0, 4.0)
    state.update_objects([a, b])
    assert state.objects == [a, b]


def test_update_replaces_object_with_same_number_and_type():
    state = GameState()
    state.update_objects([obj(ObjectType.FOOD, 7, 1.0, 1.0)])
    moved = obj(ObjectType.FOOD, 7, 5.0, 6.0)
    state.update_objects([moved])
    assert state.objects == [moved]


def test_same_number_different_type_is_a_separate_object():
    state = GameState()
    food = obj(ObjectType.FOOD, 2, 1.0, 1.0)
    spark = obj(ObjectType.SPARK, 2, 1.0, 1.0)
    state.update_objects([food, spark])
    assert state.objects == [food, spark]


def test_empty_update_changes_nothing():
    state = GameState()
    state.update_objects([obj(ObjectType.FOOD, 1, 0.0, 0.0)])
    before = list(state.objects)
    state.update_objects([])
    assert state.objects == before


def test_object_count_is_capped():
    state = GameState()
    state.update_objects(obj(ObjectType.FOOD, n, float(n), 0.0) for n in range(20))
    assert len(state.objects) == 16
    assert [o.object_no for o in state.objects] == list(range(16))


def test_dead_objects_are_removed_after_update():
    state = GameState()
    alive = obj(ObjectType.FOOD, 1, 0.0, 0.0, hp=5)
    state.update_objects([alive, obj(ObjectType.FOOD, 2, 0.0, 0.0, hp=0)])
    assert state.objects == [alive]
    state.update_objects([obj(ObjectType.FOOD, 1, 0.0, 0.0, hp=-3)])
    assert state.objects == []


def test_remove_dead_objects_handles_consecutive_dead():
    state = GameState()
    state.objects = [
        obj(ObjectType.FOOD, 1, 0.0, 0.0, hp=0),
        obj(ObjectType.FOOD, 2, 0.0, 0.0, hp=0),
        obj(ObjectType.FOOD, 3, 0.0, 0.0, hp=1),
    ]
    state.remove_dead_objects()
    assert [o.object_no for o in state.objects] == [3]


def test_store_nearest_sparks_keeps_first_five():
    state = GameState()
    state.objects = [obj(ObjectType.SPARK, n, float(n), float(-n)) for n in range(8)]
    state.objects.insert(0, obj(ObjectType.FOOD, 99, 50.0, 50.0))
    state.store_nearest_sparks()
    assert state.stored_sparks == [(float(n), float(-n)) for n in range(5)]


def test_threat_ignores_self_dead_and_distant_players():
    state = active_state(1)
    state.objects = [
        obj(ObjectType.PLAYER, 1, 0.0, 0.0, hp=10),
        obj(ObjectType.PLAYER, 2, 0.0, 0.0, hp=0),
        obj(ObjectType.PLAYER, 3, 500.0, 0.0, hp=10),
        obj(ObjectType.FOOD, 4, 0.0, 0.0, hp=10),
    ]
    assert state.threat_score(0.0, 0.0) == 0.0


def test_threat_grows_as_opponent_gets_closer():
    state = active_state(1)
    state.objects = [obj(ObjectType.PLAYER, 2, 0.0, 0.0, hp=10)]
    near = state.threat_score(10.0, 0.0)
    far = state.threat_score(90.0, 0.0)
    assert near > far > 0.0
    assert state.threat_score(0.0, 0.0) == pytest.approx(1.0)


def test_avoid_spark_without_sparks_points_at_target():
    state = GameState()
    assert state.avoid_spark_trajectory(0.0, 10.0, 0.0, 0.0) == pytest.approx(math.pi / 2)


def test_avoid_spark_turns_away_from_spark_on_left():
    state = GameState()
    state.stored_sparks = [(50.0, 10.0)]
    assert state.avoid_spark_trajectory(100.0, 0.0, 0.0, 0.0) == pytest.approx(-math.pi / 2)


def test_avoid_spark_turns_away_from_spark_on_right():
    state = GameState()
    state.stored_sparks = [(50.0, -10.0)]
    assert state.avoid_spark_trajectory(100.0, 0.0, 0.0, 0.0) == pytest.approx(math.pi / 2)


@pytest.mark.parametrize("spark", [(500.0, 0.0), (-50.0, 0.0)])
def test_avoid_spark_ignores_far_or_behind_sparks(spark):
    state = GameState()
    state.stored_sparks = [spark]
    assert state.avoid_spark_trajectory(100.0, 0.0, 0.0, 0.0) == pytest.approx(0.0)


def test_movement_is_zero_when_inactive_or_empty():
    state = GameState()
    state.objects = [obj(ObjectType.FOOD, 1, 10.0, 10.0)]
    assert state.calculate_movement() == 0.0
    assert active_state().calculate_movement() == 0.0


def test_movement_heads_to_nearest_food():
    state = active_state(1)
    state.objects = [
        obj(ObjectType.PLAYER, 1, 10.0, 10.0),
        obj(ObjectType.FOOD, 1, 10.0, 300.0),
        obj(ObjectType.FOOD, 2, 10.0, 20.0),
        obj(ObjectType.FOOD, 3, 200.0, 10.0),
    ]
    assert state.calculate_movement() == pytest.approx(math.pi / 2)


def test_movement_without_food_is_zero():
    state = active_state(1)
    state.objects = [obj(ObjectType.PLAYER, 1, 10.0, 10.0)]
    assert state.calculate_movement() == 0.0


def test_movement_avoids_spark_in_the_way():
    state = active_state(1)
    state.objects = [
        obj(ObjectType.PLAYER, 1, 0.0, 0.0),
        obj(ObjectType.FOOD, 1, 100.0, 0.0),
        obj(ObjectType.SPARK, 1, 50.0, 10.0),
    ]
    assert state.calculate_movement() == pytest.approx(-math.pi / 2)
    assert state.stored_sparks == [(50.0, 10.0)]