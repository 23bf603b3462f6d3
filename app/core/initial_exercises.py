"""
Starter catalogue of global exercises.
Each entry names the default global section it belongs to.
"""

INITIAL_EXERCISES = [
    # Strength - upper body
    {
        "name": "Push-Ups",
        "section": "Strength",
        "category": "Strength",
        "target_muscle": "Chest",
        "secondary_muscles": ["Shoulders", "Triceps"],
        "equipment": "Bodyweight",
        "difficulty": "Beginner",
        "description": "A fundamental bodyweight exercise that builds chest, shoulder and triceps strength.",
        "instructions": [
            "Start in plank position with hands slightly wider than shoulders",
            "Lower your body until your chest nearly touches the floor",
            "Push back up to the starting position",
        ],
        "pro_tips": ["Keep a straight line from head to heels", "Control the descent"],
        "default_sets": 3,
        "default_reps": 12,
    },
    {
        "name": "Bench Press",
        "section": "Strength",
        "category": "Strength",
        "target_muscle": "Chest",
        "secondary_muscles": ["Shoulders", "Triceps"],
        "equipment": "Barbell",
        "difficulty": "Intermediate",
        "description": "A compound upper body press for chest strength and mass.",
        "instructions": [
            "Lie flat on a bench with your feet on the ground",
            "Grip the bar slightly wider than shoulder width",
            "Lower the bar to your chest with control",
            "Press the bar back to the starting position",
        ],
        "pro_tips": ["Keep your shoulder blades retracted", "Breathe out as you press up"],
        "default_sets": 4,
        "default_reps": 8,
    },
    {
        "name": "Bent-Over Row",
        "section": "Strength",
        "category": "Strength",
        "target_muscle": "Back",
        "secondary_muscles": ["Biceps", "Forearms"],
        "equipment": "Barbell",
        "difficulty": "Intermediate",
        "description": "A pulling movement that thickens the upper and middle back.",
        "instructions": [
            "Hinge at the hips with a flat back",
            "Pull the bar towards your lower ribs",
            "Lower it under control",
        ],
        "pro_tips": ["Do not jerk the weight", "Squeeze your shoulder blades at the top"],
        "default_sets": 4,
        "default_reps": 10,
    },
    {
        "name": "Overhead Press",
        "section": "Strength",
        "category": "Strength",
        "target_muscle": "Shoulders",
        "secondary_muscles": ["Triceps"],
        "equipment": "Barbell",
        "difficulty": "Intermediate",
        "description": "A standing press that builds shoulder strength and stability.",
        "instructions": [
            "Hold the bar at shoulder height",
            "Press it overhead until your arms are locked out",
            "Lower it back to your shoulders",
        ],
        "pro_tips": ["Brace your core", "Keep your ribs down"],
        "default_sets": 4,
        "default_reps": 8,
    },
    {
        "name": "Bicep Curls",
        "section": "Strength",
        "category": "Strength",
        "target_muscle": "Biceps",
        "secondary_muscles": ["Forearms"],
        "equipment": "Dumbbells",
        "difficulty": "Beginner",
        "description": "An isolation exercise for the biceps.",
        "instructions": [
            "Stand holding dumbbells at your sides, palms forward",
            "Curl the weights while keeping your elbows still",
            "Lower them slowly",
        ],
        "pro_tips": ["Do not swing your body", "Control the lowering phase"],
        "default_sets": 3,
        "default_reps": 12,
    },
    # Strength - lower body
    {
        "name": "Squat",
        "section": "Strength",
        "category": "Strength",
        "target_muscle": "Legs",
        "secondary_muscles": ["Glutes", "Core"],
        "equipment": "Barbell",
        "difficulty": "Intermediate",
        "description": "The key lower body strength movement.",
        "instructions": [
            "Stand with feet shoulder-width apart",
            "Sit back and down until thighs are parallel to the floor",
            "Drive up through your heels",
        ],
        "pro_tips": ["Keep your knees in line with your toes", "Keep your chest up"],
        "default_sets": 4,
        "default_reps": 8,
    },
    {
        "name": "Deadlift",
        "section": "Strength",
        "category": "Strength",
        "target_muscle": "Back",
        "secondary_muscles": ["Glutes", "Hamstrings"],
        "equipment": "Barbell",
        "difficulty": "Advanced",
        "description": "A full posterior chain lift from the floor.",
        "instructions": [
            "Stand with the bar over mid-foot",
            "Grip the bar and flatten your back",
            "Stand up by driving your hips forward",
            "Lower the bar along your legs",
        ],
        "pro_tips": ["Keep the bar close to your body", "Never round your lower back"],
        "default_sets": 5,
        "default_reps": 5,
    },
    {
        "name": "Walking Lunges",
        "section": "Strength",
        "category": "Strength",
        "target_muscle": "Legs",
        "secondary_muscles": ["Glutes"],
        "equipment": "Bodyweight",
        "difficulty": "Beginner",
        "description": "A unilateral leg exercise that also trains balance.",
        "instructions": [
            "Step forward and lower your back knee towards the floor",
            "Push off the front foot into the next step",
        ],
        "pro_tips": ["Keep your torso upright"],
        "default_sets": 3,
        "default_reps": 12,
    },
    {
        "name": "Plank",
        "section": "Strength",
        "category": "Strength",
        "target_muscle": "Core",
        "secondary_muscles": ["Shoulders"],
        "equipment": "Bodyweight",
        "difficulty": "Beginner",
        "description": "An isometric hold for core stability.",
        "instructions": [
            "Rest on your forearms and toes",
            "Hold a straight line from head to heels",
        ],
        "pro_tips": ["Squeeze your glutes", "Do not let your hips sag"],
        "default_sets": 3,
        "default_reps": 1,
        "default_duration": 60,
    },
    # Cardio
    {
        "name": "Jumping Jacks",
        "section": "Cardio",
        "category": "Cardio",
        "target_muscle": "Cardiovascular",
        "secondary_muscles": ["Shoulders", "Calves"],
        "equipment": "Bodyweight",
        "difficulty": "Beginner",
        "description": "A classic warm-up that raises the heart rate.",
        "instructions": [
            "Start with feet together and arms at your sides",
            "Jump your feet apart while raising your arms overhead",
            "Jump back to the start",
        ],
        "pro_tips": ["Land softly on the balls of your feet"],
        "default_sets": 3,
        "default_reps": 30,
    },
    {
        "name": "Running",
        "section": "Cardio",
        "category": "Cardio",
        "target_muscle": "Cardiovascular",
        "secondary_muscles": ["Legs"],
        "equipment": "None",
        "difficulty": "Beginner",
        "description": "Steady-state running for endurance.",
        "instructions": ["Warm up with a brisk walk", "Run at a pace you can hold a conversation at"],
        "pro_tips": ["Increase weekly distance gradually"],
        "default_sets": 1,
        "default_reps": 1,
        "default_duration": 1800,
    },
    {
        "name": "Rowing Machine",
        "section": "Cardio",
        "category": "Cardio",
        "target_muscle": "Cardiovascular",
        "secondary_muscles": ["Back", "Legs"],
        "equipment": "Machine",
        "difficulty": "Intermediate",
        "description": "Low-impact full body conditioning.",
        "instructions": ["Drive with the legs first", "Then lean back and pull the handle to your ribs"],
        "pro_tips": ["Legs, hips, arms on the drive; reverse on the recovery"],
        "default_sets": 1,
        "default_reps": 1,
        "default_duration": 1200,
    },
    # HIIT
    {
        "name": "Burpees",
        "section": "HIIT",
        "category": "Mixed",
        "target_muscle": "Full Body",
        "secondary_muscles": ["Chest", "Legs"],
        "equipment": "Bodyweight",
        "difficulty": "Intermediate",
        "description": "An explosive full body movement for conditioning.",
        "instructions": [
            "Drop into a squat and place your hands on the floor",
            "Jump your feet back into a plank",
            "Jump your feet in and explode upwards",
        ],
        "pro_tips": ["Keep a steady rhythm"],
        "default_sets": 4,
        "default_reps": 10,
    },
    {
        "name": "Box Jumps",
        "section": "HIIT",
        "category": "Cardio",
        "target_muscle": "Legs",
        "secondary_muscles": ["Calves", "Glutes"],
        "equipment": "Box",
        "difficulty": "Advanced",
        "description": "A plyometric jump that develops lower body power.",
        "instructions": [
            "Stand facing a sturdy box",
            "Swing your arms and jump onto the box",
            "Step down one foot at a time",
        ],
        "pro_tips": ["Start with a low box", "Land softly"],
        "default_sets": 3,
        "default_reps": 10,
    },
    {
        "name": "Mountain Climbers",
        "section": "HIIT",
        "category": "Cardio",
        "target_muscle": "Core",
        "secondary_muscles": ["Shoulders", "Legs"],
        "equipment": "Bodyweight",
        "difficulty": "Beginner",
        "description": "Fast alternating knee drives from a plank.",
        "instructions": ["Start in a high plank", "Drive your knees towards your chest one after the other"],
        "pro_tips": ["Keep your hips level"],
        "default_sets": 3,
        "default_reps": 30,
    },
    # Flexibility
    {
        "name": "Hamstring Stretch",
        "section": "Flexibility",
        "category": "Flexibility",
        "target_muscle": "Flexibility",
        "secondary_muscles": ["Lower Back"],
        "equipment": "None",
        "difficulty": "Beginner",
        "description": "A seated stretch for the back of the legs.",
        "instructions": ["Sit with legs straight", "Reach towards your toes and hold"],
        "pro_tips": ["Do not bounce"],
        "default_sets": 2,
        "default_reps": 1,
        "default_duration": 30,
    },
    {
        "name": "Downward Dog",
        "section": "Flexibility",
        "category": "Flexibility",
        "target_muscle": "Flexibility",
        "secondary_muscles": ["Shoulders", "Calves"],
        "equipment": "Mat",
        "difficulty": "Beginner",
        "description": "A yoga pose that stretches the calves, hamstrings and shoulders.",
        "instructions": ["From all fours lift your hips up and back", "Press your heels towards the floor"],
        "pro_tips": ["Bend your knees if your back rounds"],
        "default_sets": 2,
        "default_reps": 1,
        "default_duration": 45,
    },
]
