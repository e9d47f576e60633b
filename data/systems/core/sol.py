# Sol, authored with the custom systems scripting API.

sol = CustomSystemBody.new("Sol", "STAR_G") \
    .radius(f(1, 1)).mass(f(1, 1)).temp(5700) \
    .metallicity(f(1, 2)).rotation_period(f(2509, 100)).axial_tilt(f(7, 1))

mercury = CustomSystemBody.new("Mercury", "PLANET_TERRESTRIAL") \
    .radius(f(38, 100)).mass(f(55, 1000)).temp(340) \
    .semi_major_axis(f(387, 1000)).eccentricity(f(205, 1000)).inclination(math.radians(7.0)) \
    .rotation_period(f(586, 10)).axial_tilt(fixed(1, 100)) \
    .metallicity(f(9, 10)).volcanicity(f(0, 1)).atmos_density(f(0, 1)).life(f(0, 1))

earth = CustomSystemBody.new("Earth", "PLANET_TERRESTRIAL") \
    .radius(f(1, 1)).mass(f(1, 1)).temp(288) \
    .semi_major_axis(f(1, 1)).eccentricity(f(167, 10000)).rotation_period(f(1, 1)) \
    .axial_tilt(fixed(410, 1000)).orbital_phase_at_start(f(0, 1)) \
    .metallicity(f(1, 2)).volcanicity(f(1, 10)).atmos_density(f(1, 1)).atmos_oxidizing(f(99, 100)) \
    .ocean_cover(f(7, 10)).ice_cover(f(3, 100)).life(f(9, 10)) \
    .height_map("earth.hmap", 0)

moon = CustomSystemBody.new("Moon", "PLANET_TERRESTRIAL") \
    .radius(f(273, 1000)).mass(f(12, 1000)).temp(220) \
    .semi_major_axis(f(257, 100000)).eccentricity(f(549, 10000)).rotation_period(f(273, 10)) \
    .axial_tilt(fixed(668, 10000)).metallicity(f(1, 2))

shanghai = CustomSystemBody.new("Shanghai", "STARPORT_SURFACE") \
    .latitude(math.radians(31.2)).longitude(math.radians(-121.5))

gates = CustomSystemBody.new("Gates Spaceport", "STARPORT_ORBITAL") \
    .semi_major_axis(f(100, 100000)).rotation_period(f(1, 24 * 60 * 3)) \
    .space_station_type("orbital_station")

tranquility = CustomSystemBody.new("Tranquility Base", "STARPORT_SURFACE") \
    .latitude(math.radians(0.67)).longitude(math.radians(-23.47))

saturn = CustomSystemBody.new("Saturn", "PLANET_GAS_GIANT") \
    .radius(f(945, 100)).mass(f(9516, 100)).temp(134) \
    .semi_major_axis(f(9582, 1000)).eccentricity(f(565, 10000)).rotation_period(f(44, 100)) \
    .axial_tilt(fixed(466, 1000)).equatorial_to_polar_radius(f(1098, 1000)) \
    .rings(f(1116, 1000), f(2327, 1000), [0.85, 0.78, 0.62])

system = CustomSystem.new("Sol", ["STAR_G"]) \
    .govtype("EARTHDEMOC") \
    .faction("Solar Federation") \
    .explored(True) \
    .lawlessness(f(0, 1)) \
    .short_desc("The historical birthplace of humankind") \
    .long_desc("Sol is a fine joint.")

system.bodies(sol, [
    mercury,
    earth, [
        shanghai,
        gates,
        moon, [
            tranquility,
        ],
    ],
    saturn,
])

system.add_to_sector(0, 0, 0, v(0.5, 0.5, 0.0))
