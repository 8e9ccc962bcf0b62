from __future__ import annotations

import asyncio
import contextlib
import json
from dataclasses import asdict
from typing import Any, Dict, Optional, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from scheduler import SCHEDULER_REGISTRY, LearnedMetaPolicy, get_scheduler
from simulation import Building, SimulatorSettings, Simulator


class SchedulerSelection(BaseModel):
    name: str
    options: Dict[str, Any] = {}


class SpawnRequest(BaseModel):
    origin: int
    destination: int


class SimulationManager:
    def __init__(
        self,
        num_floors: int = 20,
        elevator_count: int = 4,
        tick_interval: float = 0.25,
        scheduler_name: str = "longest_queue_first",
        random_seed: Optional[int] = None,
    ) -> None:
        building = Building.create(num_floors, elevator_count)
        self.scheduler_name = scheduler_name
        self.simulation = Simulator(
            building=building,
            scheduler=get_scheduler(scheduler_name, building),
            settings=SimulatorSettings(time_step=tick_interval),
            random_seed=random_seed,
        )
        self.tick_interval = tick_interval
        self.clients: Set[WebSocket] = set()
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    async def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None

    async def _run(self) -> None:
        running = True
        while running:
            async with self._lock:
                running = self.simulation.advance()
                payload = self.current_state()
            await self.broadcast(payload)
            await asyncio.sleep(self.tick_interval)

    async def broadcast(self, payload: dict) -> None:
        message = json.dumps(payload)
        disconnected: Set[WebSocket] = set()
        for client in set(self.clients):
            try:
                await client.send_text(message)
            except WebSocketDisconnect:
                disconnected.add(client)
        for client in disconnected:
            await self.unregister(client)

    async def register(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.clients.add(websocket)
        await websocket.send_text(json.dumps(self.current_state()))

    async def unregister(self, websocket: WebSocket) -> None:
        if websocket in self.clients:
            self.clients.remove(websocket)
        with contextlib.suppress(Exception):
            await websocket.close()

    def current_state(self) -> dict:
        simulation = self.simulation
        metrics = asdict(simulation.stats.snapshot(simulation.current_time))
        state = {
            "time": simulation.clock.elapsed_seconds,
            "building": simulation.building.snapshot(),
            "hall_calls": len(simulation.control_system),
            "metrics": metrics,
            "scheduler": str(simulation.scheduler),
        }
        scheduler = simulation.scheduler
        if isinstance(scheduler, LearnedMetaPolicy):
            state["meta_policy"] = {
                "active": str(scheduler.active),
                "switches": scheduler.switch_count,
                "seconds": scheduler.usage_seconds(simulation),
            }
        return state

    async def set_scheduler(self, name: str, options: Dict[str, Any]) -> dict:
        async with self._lock:
            scheduler = get_scheduler(name, self.simulation.building, **options)
            self.simulation.set_scheduler(scheduler)
            self.scheduler_name = name
            return self.current_state()

    async def spawn_passenger(self, origin: int, destination: int) -> dict:
        async with self._lock:
            self.simulation.spawn_passenger(origin, destination)
            state = self.current_state()
            state["spawned"] = {"origin": origin, "destination": destination}
            return state


manager = SimulationManager()
app = FastAPI(title="Elevator Dispatch Simulation API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def on_startup() -> None:
    await manager.start()


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await manager.stop()


@app.get("/state")
async def get_state() -> dict:
    return manager.current_state()


@app.get("/schedulers")
async def list_schedulers() -> dict:
    return {"available": sorted(SCHEDULER_REGISTRY), "active": manager.scheduler_name}


@app.post("/scheduler")
async def set_scheduler(selection: SchedulerSelection) -> dict:
    try:
        return await manager.set_scheduler(selection.name, selection.options)
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.post("/passengers")
async def spawn_passenger(request: SpawnRequest) -> dict:
    try:
        return await manager.spawn_passenger(request.origin, request.destination)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.websocket("/ws/stream")
async def websocket_endpoint(websocket: WebSocket) -> None:
    await manager.register(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await manager.unregister(websocket)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.app:app", host="0.0.0.0", port=8000, reload=False)
