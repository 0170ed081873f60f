"""Console for running proximity checks against the configured stores."""

import asyncio

from .domain.errors import ProximityVerificationError
from .infrastructure.dependencies import ServiceContainer


async def main():
    """Run interactive proximity checks."""
    print("Complaint Trust - reporter proximity verification")
    print("-------------------------------------------------")

    container = ServiceContainer()
    service = await container.get_proximity_service()

    try:
        while True:
            raw = input("\nEnter '<business id> <latitude> <longitude>' (or 'quit' to exit): ").strip()
            if raw.lower() in ('quit', 'exit', 'q'):
                break

            parts = raw.split()
            if len(parts) != 3:
                print("Expected three values")
                continue

            try:
                business_pk = int(parts[0])
                lat, lng = float(parts[1]), float(parts[2])
            except ValueError:
                print("Business id must be an integer and coordinates numbers")
                continue

            print("\nVerifying...")
            try:
                result = await service.verify(business_pk, lat, lng)

                print("\nResults:")
                print(f"Tag: {result.tag.value}")
                print(f"Distance: {result.distance_meters:.1f} m (threshold {result.threshold_meters:.0f} m)")
                print(f"Business: {result.business_address or 'no address'} "
                      f"@ {result.business_coords.lat:.6f}, {result.business_coords.lng:.6f} "
                      f"({result.coords_source.value})")

            except ProximityVerificationError as e:
                print(f"\nVerification failed ({e.reason.value}): {e.message}")

    finally:
        # Clean up
        await container.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
