"""FastAPI server for Fleet Tactics.

Provides the HTTP/WebSocket API for networked play. Every move is a
read-modify-write against the game store; WebSocket clients receive each
new snapshot redacted for their own seat.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from ..engine.errors import IllegalMoveError
from ..models.game import GameMode, MapType, OpponentType
from ..utils.serialization import player_view
from .schemas.requests import CreateGameRequest, JoinGameRequest, MoveRequest
from .schemas.responses import (
    CreateGameResponse,
    GameStateResponse,
    JoinGameResponse,
    MoveResponse,
)
from .session import GameNotFoundError, GameSessionManager, UnauthorizedError
from .store import StaleStateError

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Global session manager
sessions = GameSessionManager()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown."""
    # Startup
    logger.info("Fleet Tactics server starting...")
    yield
    # Shutdown
    logger.info("Fleet Tactics server shutting down...")
    await sessions.cleanup_all()


# Create FastAPI app
app = FastAPI(
    title="Fleet Tactics API",
    description="Web API for Classic and Tactical fleet battles",
    version="1.0.0",
    lifespan=lifespan,
)

# Enable CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify exact origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _not_found(game_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Game {game_id} not found")


# ============================================
# API ENDPOINTS
# ============================================


@app.get("/api")
async def api_root():
    """API root endpoint - server health check."""
    return {
        "service": "Fleet Tactics",
        "status": "operational",
        "activeGames": len(sessions.sessions),
    }


@app.post("/api/games", response_model=CreateGameResponse)
async def create_game(request: CreateGameRequest):
    """Create a new game and seat its creator.

    Example:
        POST /api/games
        {
          "mode": "TACTICAL",
          "mapType": "ASTEROID_FIELD",
          "opponentType": "AI",
          "playerName": "Ada",
          "seed": 42
        }
    """
    try:
        mode = GameMode(request.mode)
        map_type = MapType(request.mapType)
        opponent_type = OpponentType(request.opponentType)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        stored, player_id, token = sessions.create_game(
            mode,
            map_type,
            opponent_type,
            request.playerName,
            opponent_name=request.opponentName,
            seed=request.seed,
        )
    except Exception as e:
        logger.error(f"Failed to create game: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to create game: {str(e)}")

    return CreateGameResponse(
        gameId=stored.state.game_id,
        playerId=player_id,
        token=token,
        version=stored.version,
        state=player_view(stored.state, player_id),
    )


@app.post("/api/games/{game_id}/join", response_model=JoinGameResponse)
async def join_game(game_id: str, request: JoinGameRequest):
    """Join an online game that is waiting in the lobby."""
    try:
        stored, player_id, token = sessions.join_game(game_id, request.playerName)
    except GameNotFoundError:
        raise _not_found(game_id)
    except IllegalMoveError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StaleStateError as e:
        raise HTTPException(status_code=409, detail=str(e))

    await sessions.sessions[game_id].broadcast_state(stored.state, stored.version)
    return JoinGameResponse(
        gameId=game_id,
        playerId=player_id,
        token=token,
        version=stored.version,
        state=player_view(stored.state, player_id),
    )


@app.get("/api/games/{game_id}", response_model=GameStateResponse)
async def get_game_state(game_id: str, playerId: str, token: str):  # noqa: N803
    """Get the game as seen from one seat.

    Example:
        GET /api/games/game-1a2b3c4d?playerId=p1&token=...
    """
    try:
        stored, view = sessions.view(game_id, playerId, token)
    except GameNotFoundError:
        raise _not_found(game_id)
    except UnauthorizedError:
        raise HTTPException(status_code=403, detail="Invalid session token")

    state = stored.state
    return GameStateResponse(
        gameId=game_id,
        turn=state.turn,
        phase=state.phase.value,
        winner=state.winner,
        currentPlayerId=state.current_player_id,
        version=stored.version,
        state=view,
    )


@app.post("/api/games/{game_id}/moves", response_model=MoveResponse)
async def submit_move(game_id: str, request: MoveRequest):
    """Apply one move.

    Ending a turn against the AI also plays out the AI's reply; WebSocket
    clients see each AI action as it is applied.

    Example:
        POST /api/games/game-1a2b3c4d/moves
        {"type": "fireShot", "playerId": "p1", "token": "...", "x": 3, "y": 7}
    """
    try:
        stored, accepted = await sessions.apply_move(game_id, request)
    except GameNotFoundError:
        raise _not_found(game_id)
    except UnauthorizedError:
        raise HTTPException(status_code=403, detail="Invalid session token")
    except (IllegalMoveError, ValueError) as e:
        logger.warning(f"Game {game_id}: rejected {request.type} from {request.playerId}: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except StaleStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.error(f"Game {game_id}: move {request.type} failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to apply move: {str(e)}")

    state = stored.state
    return MoveResponse(
        accepted=accepted,
        turn=state.turn,
        phase=state.phase.value,
        version=stored.version,
        errors=[] if accepted else ["The move had no effect."],
        winner=state.winner,
        state=player_view(state, request.playerId),
    )


@app.delete("/api/games/{game_id}")
async def delete_game(game_id: str):
    """Delete a game session.

    Args:
        game_id: Game session ID

    Returns:
        Success status
    """
    if sessions.delete(game_id):
        return {"message": f"Game {game_id} deleted"}
    else:
        raise _not_found(game_id)


# ============================================
# WEBSOCKET ENDPOINT
# ============================================


@app.websocket("/ws/games/{game_id}")
async def websocket_endpoint(websocket: WebSocket, game_id: str, playerId: str, token: str):  # noqa: N803
    """WebSocket connection for real-time game updates.

    Clients receive:
    - CONNECTED: Initial connection confirmation
    - GAME_STATE: A new snapshot, redacted for the client's seat
    - AI_THINKING: The AI has started its turn

    Args:
        websocket: WebSocket connection
        game_id: Game session ID
        playerId: Seat the client views the game from
        token: Session token for that seat
    """
    try:
        session = sessions.authorize(game_id, playerId, token)
        stored = sessions.get(game_id)
    except (GameNotFoundError, UnauthorizedError):
        await websocket.close(code=1008, reason="Game not found or invalid session")
        return

    await websocket.accept()
    session.add_connection(websocket, playerId)

    try:
        # Send initial connection confirmation
        await websocket.send_json(
            {
                "type": "CONNECTED",
                "gameId": game_id,
                "version": stored.version,
                "state": player_view(stored.state, playerId),
            }
        )

        # Keep connection alive and handle client messages
        while True:
            data = await websocket.receive_json()

            # Handle ping/pong for keepalive
            if data.get("type") == "PING":
                await websocket.send_json({"type": "PONG"})

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected from game {game_id}")
    except Exception as e:
        logger.error(f"WebSocket error in game {game_id}: {e}", exc_info=True)
    finally:
        session.remove_connection(websocket)
